"""Fallback PDF text extraction using pdfplumber.

Walks the document page by page through pdfminer's layout analysis, which
copes with content streams the primary decoder rejects. Slower, so it only
runs when the primary PyMuPDF attempt fails recoverably.
"""

from __future__ import annotations

import io
import logging
import threading

from resume_extractor.extractor.guard import check_aborted
from resume_extractor.extractor.quality import collapse_whitespace
from resume_extractor.extractor.types import DecoderKind, ExtractionResult, SourceFormat

logger = logging.getLogger(__name__)


def decode_pages(data: bytes, abort: threading.Event) -> ExtractionResult:
    """Extract text from an in-memory PDF one page at a time.

    Page texts are joined with a single newline, then all whitespace is
    collapsed and trimmed. Each page's cached layout objects are released as
    soon as the page is done, and the document is closed on every exit path,
    including an abort after the timeout guard has given up.

    The scanned-document check is applied by the caller, which owns the
    threshold setting.

    Args:
        data: Raw PDF bytes.
        abort: Set by the timeout guard once this attempt has been abandoned.

    Returns:
        ExtractionResult with whitespace-collapsed text and the page count.

    Raises:
        ExtractionError: ``TIMED_OUT`` when aborted between pages.
        Exception: Raw pdfplumber / pdfminer errors, for the engine to
            classify.
    """
    import pdfplumber

    page_texts: list[str] = []

    with pdfplumber.open(io.BytesIO(data)) as pdf:
        page_count = len(pdf.pages)

        for page_num, page in enumerate(pdf.pages, start=1):
            check_aborted(abort, DecoderKind.FALLBACK.value)
            try:
                page_texts.append(page.extract_text() or "")
            finally:
                page.close()
            logger.debug("pdfplumber read page %d/%d", page_num, page_count)

    text = collapse_whitespace("\n".join(page_texts))

    logger.debug("pdfplumber extracted %d chars from %d pages", len(text), page_count)

    return ExtractionResult(
        text=text,
        source_format=SourceFormat.PDF,
        page_count=page_count,
        decoder=DecoderKind.FALLBACK,
    )


def is_available() -> bool:
    """True when pdfplumber can be imported."""
    try:
        import pdfplumber  # noqa: F401
    except ImportError:
        return False
    return True
