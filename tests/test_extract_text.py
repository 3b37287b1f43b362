"""Service entry point: size check, routing, TXT/DOCX extractors, batch, CLI."""

from __future__ import annotations

import json

import pytest

import main as cli
import resume_extractor.extractor as extractor_pkg
from resume_extractor.extractor import (
    ErrorKind,
    ExtractionError,
    ExtractionRequest,
    SourceFormat,
    extract_files,
    extract_text,
)
from resume_extractor.extractor.docx_extractor import extract_docx_text
from resume_extractor.extractor.formats import DOCX_MIME
from resume_extractor.extractor.plaintext import extract_plain_text


def _request(data: bytes, mime: str, name: str) -> ExtractionRequest:
    return ExtractionRequest.from_bytes(data, mime, name)


# ---------------------------------------------------------------------------
# Request construction
# ---------------------------------------------------------------------------


def test_request_from_bytes_sets_size():
    request = _request(b"hello", "text/plain", "a.txt")
    assert request.size_bytes == 5


def test_request_is_immutable():
    request = _request(b"hello", "text/plain", "a.txt")
    with pytest.raises(AttributeError):
        request.file_name = "b.txt"


def test_request_from_path_guesses_mime(tmp_path):
    path = tmp_path / "resume.pdf"
    path.write_bytes(b"%PDF-1.7")
    request = ExtractionRequest.from_path(path)
    assert request.declared_mime == "application/pdf"
    assert request.file_name == "resume.pdf"
    assert request.size_bytes == 8


def test_request_from_path_unknown_extension(tmp_path):
    path = tmp_path / "resume.zzz"
    path.write_bytes(b"x")
    assert ExtractionRequest.from_path(path).declared_mime == "application/octet-stream"


# ---------------------------------------------------------------------------
# Routing and local validation
# ---------------------------------------------------------------------------


def test_pdf_routed_to_engine(resume_pdf, settings):
    result = extract_text(_request(resume_pdf, "application/pdf", "cv.pdf"), settings)
    assert result.source_format is SourceFormat.PDF
    assert result.page_count == 1
    assert "Jane Doe" in result.text


def test_pdf_detected_by_extension(resume_pdf, settings):
    request = _request(resume_pdf, "application/octet-stream", "CV.PDF")
    assert extract_text(request, settings).source_format is SourceFormat.PDF


def test_too_large_never_reaches_decoder(settings, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("decoder should not run")

    monkeypatch.setattr(extractor_pkg, "extract_pdf", fail)
    small_limit = settings.model_copy(update={"max_file_size_bytes": 10})

    with pytest.raises(ExtractionError) as exc_info:
        extract_text(_request(b"%PDF-" + b"0" * 100, "application/pdf", "big.pdf"), small_limit)

    assert exc_info.value.kind is ErrorKind.TOO_LARGE


def test_declared_size_is_checked(settings):
    request = ExtractionRequest(
        data=b"short", declared_mime="text/plain", file_name="a.txt", size_bytes=11_000_000
    )
    with pytest.raises(ExtractionError) as exc_info:
        extract_text(request, settings)
    assert exc_info.value.kind is ErrorKind.TOO_LARGE


def test_unsupported_never_reaches_decoder(settings, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("decoder should not run")

    monkeypatch.setattr(extractor_pkg, "extract_pdf", fail)

    with pytest.raises(ExtractionError) as exc_info:
        extract_text(_request(b"\xd0\xcf\x11\xe0", "application/msword", "cv.doc"), settings)

    assert exc_info.value.kind is ErrorKind.UNSUPPORTED_FORMAT


def test_unexpected_error_becomes_unknown(settings, monkeypatch):
    def explode(data):
        raise KeyError("boom")

    monkeypatch.setattr(extractor_pkg, "extract_plain_text", explode)

    with pytest.raises(ExtractionError) as exc_info:
        extract_text(_request(b"text", "text/plain", "a.txt"), settings)

    assert exc_info.value.kind is ErrorKind.UNKNOWN


def test_scanned_pdf_through_service(scanned_pdf, settings):
    with pytest.raises(ExtractionError) as exc_info:
        extract_text(_request(scanned_pdf, "application/pdf", "scan.pdf"), settings)
    assert exc_info.value.kind is ErrorKind.SCANNED_NO_TEXT


# ---------------------------------------------------------------------------
# TXT
# ---------------------------------------------------------------------------


def test_txt_is_trimmed(settings):
    result = extract_text(_request(b"  Senior Engineer\n\n", "text/plain", "jd.txt"), settings)
    assert result.text == "Senior Engineer"
    assert result.source_format is SourceFormat.TXT
    assert result.page_count is None
    assert result.decoder is None


def test_empty_txt_yields_empty_text(settings):
    result = extract_text(_request(b"", "text/plain", "empty.txt"), settings)
    assert result.text == ""


def test_txt_drops_bom():
    assert extract_plain_text("\ufeffRésumé".encode("utf-8")) == "Résumé"


def test_txt_invalid_utf8():
    with pytest.raises(ExtractionError) as exc_info:
        extract_plain_text(b"caf\xe9 au lait")
    assert exc_info.value.kind is ErrorKind.INVALID_OR_CORRUPT


# ---------------------------------------------------------------------------
# DOCX
# ---------------------------------------------------------------------------


def test_docx_paragraphs_and_tables(make_docx):
    data = make_docx(
        ["Jane Doe", "Senior Software Engineer"],
        table=[["Skill", "Years"], ["Python", "8"]],
    )
    text = extract_docx_text(data)

    assert text.splitlines()[:2] == ["Jane Doe", "Senior Software Engineer"]
    assert "Skill | Years" in text
    assert "Python | 8" in text


def test_docx_through_service(make_docx, settings):
    data = make_docx(["Job description: backend engineer"])
    result = extract_text(_request(data, DOCX_MIME, "jd.docx"), settings)
    assert result.source_format is SourceFormat.DOCX
    assert result.text == "Job description: backend engineer"


def test_empty_docx_is_invalid(make_docx):
    with pytest.raises(ExtractionError) as exc_info:
        extract_docx_text(make_docx([]))
    assert exc_info.value.kind is ErrorKind.INVALID_OR_CORRUPT


def test_corrupt_docx_is_invalid():
    with pytest.raises(ExtractionError) as exc_info:
        extract_docx_text(b"PK\x03\x04 not really a zip")
    assert exc_info.value.kind is ErrorKind.INVALID_OR_CORRUPT


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------


def test_batch_isolates_failures(tmp_path, resume_pdf, settings):
    good_pdf = tmp_path / "cv.pdf"
    good_pdf.write_bytes(resume_pdf)
    good_txt = tmp_path / "jd.txt"
    good_txt.write_text("Backend engineer, Python, five years", encoding="utf-8")
    legacy = tmp_path / "old.doc"
    legacy.write_bytes(b"\xd0\xcf\x11\xe0")
    missing = tmp_path / "missing.pdf"

    batch = extract_files([good_pdf, legacy, missing, good_txt], settings)

    assert batch.files_attempted == 4
    assert batch.files_succeeded == 2
    assert batch.files_failed == 2
    assert [o.ok for o in batch.outcomes] == [True, False, False, True]
    assert batch.outcomes[1].error.code == "UNSUPPORTED_FORMAT"
    assert batch.outcomes[2].error.status == 500
    assert batch.errors == ["old.doc: UNSUPPORTED_FORMAT", "missing.pdf: unreadable"]


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def test_cli_prints_json_lines(tmp_path, monkeypatch, capsys, restore_root_logging, resume_pdf):
    monkeypatch.setenv("LOG_LOG_DIR", str(tmp_path / "logs"))
    cv = tmp_path / "cv.pdf"
    cv.write_bytes(resume_pdf)
    scan = tmp_path / "notes.xyz"
    scan.write_bytes(b"???")

    exit_code = cli.main([str(cv), str(scan), "--timeout", "5"])

    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert exit_code == 1
    assert lines[0]["ok"] is True
    assert lines[0]["source_format"] == "pdf"
    assert lines[0]["decoder"] == "primary"
    assert "Jane Doe" in lines[0]["text"]
    assert lines[1]["ok"] is False
    assert lines[1]["error"]["code"] == "UNSUPPORTED_FORMAT"


def test_cli_check_reports_decoders(tmp_path, monkeypatch, capsys, restore_root_logging):
    monkeypatch.setenv("LOG_LOG_DIR", str(tmp_path / "logs"))

    assert cli.main(["--check"]) == 0
    assert json.loads(capsys.readouterr().out) == {"primary": True, "fallback": True}
