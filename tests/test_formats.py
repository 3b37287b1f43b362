"""Format detection: MIME first, extension second, legacy .doc rejected."""

from __future__ import annotations

import pytest

from resume_extractor.extractor.errors import ErrorKind, ExtractionError
from resume_extractor.extractor.formats import DOCX_MIME, detect_format
from resume_extractor.extractor.types import SourceFormat


@pytest.mark.parametrize(
    "mime, name, expected",
    [
        ("application/pdf", "resume.pdf", SourceFormat.PDF),
        ("application/pdf", "resume", SourceFormat.PDF),
        (DOCX_MIME, "resume.docx", SourceFormat.DOCX),
        ("text/plain", "resume.txt", SourceFormat.TXT),
        ("text/markdown", "notes.md", SourceFormat.TXT),
        ("text/plain; charset=utf-8", "jd", SourceFormat.TXT),
        ("Application/PDF", "upload", SourceFormat.PDF),
        # extension when the MIME type is unhelpful
        ("application/octet-stream", "Resume.PDF", SourceFormat.PDF),
        ("", "cv.docx", SourceFormat.DOCX),
        ("application/octet-stream", "jd.TXT", SourceFormat.TXT),
    ],
)
def test_detect_format(mime, name, expected):
    assert detect_format(mime, name) is expected


def test_mime_wins_over_extension():
    assert detect_format("application/pdf", "resume.docx") is SourceFormat.PDF
    assert detect_format("text/plain", "resume.pdf") is SourceFormat.TXT


@pytest.mark.parametrize(
    "mime, name",
    [
        ("application/msword", "resume.doc"),
        ("application/msword", "resume.pdf"),
        ("application/octet-stream", "resume.doc"),
        ("", "RESUME.DOC"),
    ],
)
def test_legacy_doc_rejected(mime, name):
    with pytest.raises(ExtractionError) as exc_info:
        detect_format(mime, name)
    assert exc_info.value.kind is ErrorKind.UNSUPPORTED_FORMAT
    assert ".doc" in exc_info.value.message


@pytest.mark.parametrize(
    "mime, name",
    [
        ("image/png", "scan.png"),
        ("application/zip", "resume.zip"),
        ("application/octet-stream", "resume"),
        ("application/vnd.ms-excel", "jobs.xls"),
    ],
)
def test_unrecognized_rejected_with_mime_in_message(mime, name):
    with pytest.raises(ExtractionError) as exc_info:
        detect_format(mime, name)
    assert exc_info.value.kind is ErrorKind.UNSUPPORTED_FORMAT
    assert mime in exc_info.value.message
