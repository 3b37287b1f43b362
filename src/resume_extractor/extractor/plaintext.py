"""Plain-text extraction: strict UTF-8 decode and trim."""

from __future__ import annotations

from resume_extractor.extractor.errors import ErrorKind, ExtractionError


def extract_plain_text(data: bytes) -> str:
    """Decode UTF-8 bytes (dropping a leading BOM) and trim.

    An empty file yields an empty string.

    Raises:
        ExtractionError: ``INVALID_OR_CORRUPT`` when the bytes are not UTF-8.
    """
    try:
        return data.decode("utf-8-sig").strip()
    except UnicodeDecodeError as e:
        raise ExtractionError(
            ErrorKind.INVALID_OR_CORRUPT,
            f"Text file is not valid UTF-8 (byte {e.start})",
        ) from e
