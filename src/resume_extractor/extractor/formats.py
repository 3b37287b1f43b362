"""Format detection from declared MIME type and filename.

Exact MIME matches win; the file extension (case-insensitive) is only
consulted when the MIME type is not recognized. Legacy Word ``.doc`` files
are rejected outright since they need a native converter.
"""

from __future__ import annotations

from pathlib import PurePath

from resume_extractor.extractor.errors import ErrorKind, ExtractionError
from resume_extractor.extractor.types import SourceFormat

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME = "application/msword"

_MIME_FORMATS: dict[str, SourceFormat] = {
    PDF_MIME: SourceFormat.PDF,
    DOCX_MIME: SourceFormat.DOCX,
}

_EXTENSION_FORMATS: dict[str, SourceFormat] = {
    ".pdf": SourceFormat.PDF,
    ".docx": SourceFormat.DOCX,
    ".txt": SourceFormat.TXT,
}


def _normalize_mime(declared_mime: str | None) -> str:
    # "Text/Plain; charset=utf-8" -> "text/plain"
    return (declared_mime or "").split(";", 1)[0].strip().lower()


def _legacy_doc_error(declared_mime: str) -> ExtractionError:
    return ExtractionError(
        ErrorKind.UNSUPPORTED_FORMAT,
        f"Unsupported file type: {declared_mime or 'unknown'}. Legacy .doc "
        "files are not supported; save as DOCX or PDF.",
    )


def detect_format(declared_mime: str | None, file_name: str) -> SourceFormat:
    """Decide which extractor a document goes to.

    Args:
        declared_mime: MIME type reported by the uploader (may be empty).
        file_name: Original filename.

    Returns:
        The detected SourceFormat.

    Raises:
        ExtractionError: ``UNSUPPORTED_FORMAT`` for legacy ``.doc`` and for
            any unrecognized MIME/extension pair; the message carries the
            declared MIME type.
    """
    mime = _normalize_mime(declared_mime)

    # MIME first
    if mime in _MIME_FORMATS:
        return _MIME_FORMATS[mime]
    if mime.startswith("text/"):
        return SourceFormat.TXT
    if mime == DOC_MIME:
        raise _legacy_doc_error(declared_mime)

    # Extension second
    extension = PurePath(file_name or "").suffix.lower()
    if extension in _EXTENSION_FORMATS:
        return _EXTENSION_FORMATS[extension]
    if extension == ".doc":
        raise _legacy_doc_error(declared_mime)

    raise ExtractionError(
        ErrorKind.UNSUPPORTED_FORMAT,
        f"Unsupported file type: {declared_mime or 'unknown'}. "
        "Please upload PDF, DOCX or TXT.",
    )
