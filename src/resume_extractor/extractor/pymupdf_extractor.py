"""Primary PDF text extraction using PyMuPDF.

Reads the embedded text layer of each page straight from the content
streams, without layout analysis. Fast, but it gives up immediately on
password-protected documents and on structure it cannot parse. This is the
first decoder in the extraction fallback chain.
"""

from __future__ import annotations

import logging
import threading

from resume_extractor.extractor.errors import ErrorKind, ExtractionError
from resume_extractor.extractor.guard import check_aborted
from resume_extractor.extractor.quality import clean_text_layer
from resume_extractor.extractor.types import DecoderKind, ExtractionResult, SourceFormat

logger = logging.getLogger(__name__)


def decode_text_layer(data: bytes, abort: threading.Event) -> ExtractionResult:
    """Extract the text layer of an in-memory PDF with PyMuPDF.

    The library is imported here rather than at module load so that a missing
    or broken installation surfaces as a classifiable ``ImportError`` on the
    first PDF instead of breaking service start-up.

    Args:
        data: Raw PDF bytes.
        abort: Set by the timeout guard once this attempt has been abandoned.

    Returns:
        ExtractionResult with line-normalized text and the page count.

    Raises:
        ExtractionError: ``PASSWORD_PROTECTED`` for documents that need a
            password, ``INVALID_OR_CORRUPT`` when no text comes out,
            ``TIMED_OUT`` when aborted.
        Exception: Raw PyMuPDF errors, for the engine to classify.
    """
    import pymupdf

    with pymupdf.open(stream=data, filetype="pdf") as doc:
        if doc.needs_pass:
            raise ExtractionError(
                ErrorKind.PASSWORD_PROTECTED,
                "PDF is encrypted and requires a password (primary)",
            )

        page_count = doc.page_count
        page_texts: list[str] = []
        for page in doc:
            check_aborted(abort, DecoderKind.PRIMARY.value)
            page_texts.append(page.get_text("text"))

    text = clean_text_layer("\n".join(page_texts))
    if not text:
        raise ExtractionError(
            ErrorKind.INVALID_OR_CORRUPT, "No text content found in PDF (primary)"
        )

    logger.debug("PyMuPDF extracted %d chars from %d pages", len(text), page_count)

    return ExtractionResult(
        text=text,
        source_format=SourceFormat.PDF,
        page_count=page_count,
        decoder=DecoderKind.PRIMARY,
    )


def is_available() -> bool:
    """True when PyMuPDF can be imported."""
    try:
        import pymupdf  # noqa: F401
    except ImportError:
        return False
    return True
