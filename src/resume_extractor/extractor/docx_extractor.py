"""DOCX text extraction using python-docx.

Collects paragraph text, then table rows as ``" | "``-joined cells. DOCX has
no fallback chain: any failure to read the package is final.
"""

from __future__ import annotations

import io
import logging

from resume_extractor.extractor.errors import ErrorKind, ExtractionError

logger = logging.getLogger(__name__)


def extract_docx_text(data: bytes) -> str:
    """Extract raw text from an in-memory DOCX package.

    Args:
        data: Raw DOCX bytes.

    Returns:
        Newline-joined, trimmed document text.

    Raises:
        ExtractionError: ``DECODER_UNAVAILABLE`` when python-docx is not
            installed, ``INVALID_OR_CORRUPT`` when the package cannot be
            read or holds no text.
    """
    try:
        from docx import Document
    except ImportError as e:
        raise ExtractionError(
            ErrorKind.DECODER_UNAVAILABLE, f"DOCX decoder unavailable: {e}"
        ) from e

    try:
        doc = Document(io.BytesIO(data))
    except Exception as e:
        logger.warning("Cannot open DOCX package: %s: %s", type(e).__name__, e)
        raise ExtractionError(
            ErrorKind.INVALID_OR_CORRUPT,
            f"Invalid or corrupted DOCX: {type(e).__name__}: {e}",
        ) from e

    parts: list[str] = [para.text for para in doc.paragraphs if para.text.strip()]

    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                parts.append(" | ".join(cells))

    text = "\n".join(parts).strip()
    if not text:
        raise ExtractionError(ErrorKind.INVALID_OR_CORRUPT, "DOCX contains no text")

    logger.debug(
        "python-docx extracted %d chars (%d paragraphs, %d tables)",
        len(text),
        len(doc.paragraphs),
        len(doc.tables),
    )
    return text
