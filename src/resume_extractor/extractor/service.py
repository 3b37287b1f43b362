"""PDF text extraction engine with a primary -> fallback decoder chain.

Orchestrates the two-tier extraction of a single in-memory PDF:

1. **PyMuPDF** -- primary, text-layer-only decoder.
2. **pdfplumber** -- page-by-page fallback, only after a recoverable
   primary failure and only when ``enable_fallback`` is set.

Each attempt runs under the timeout guard with its own full budget. Every
failure is classified into exactly one ``ErrorKind``:

- ``PASSWORD_PROTECTED`` / ``TOO_LARGE`` / ``UNSUPPORTED_FORMAT`` /
  ``SCANNED_NO_TEXT`` from the primary end the request; another decoder
  cannot fix them.
- ``TIMED_OUT`` / ``INVALID_OR_CORRUPT`` / ``DECODER_UNAVAILABLE`` /
  ``UNKNOWN`` move on to the fallback.
- A fallback failure replaces the primary's diagnosis.
- Fallback text shorter than ``scanned_text_threshold`` is
  ``SCANNED_NO_TEXT``, never a near-empty success.
"""

from __future__ import annotations

import logging
import time

from resume_extractor.config.settings import ExtractionSettings
from resume_extractor.extractor import pdfplumber_extractor, pymupdf_extractor
from resume_extractor.extractor.errors import (
    ErrorKind,
    ExtractionError,
    classify_decoder_error,
)
from resume_extractor.extractor.guard import run_with_timeout
from resume_extractor.extractor.pdfplumber_extractor import decode_pages
from resume_extractor.extractor.pymupdf_extractor import decode_text_layer
from resume_extractor.extractor.quality import is_probably_scanned, log_quality_warnings
from resume_extractor.extractor.types import (
    DecodeAttempt,
    DecoderKind,
    ExtractionResult,
)

logger = logging.getLogger(__name__)

__all__ = [
    "decoder_availability",
    "extract_pdf",
]


def _run_attempt(
    decoder: DecoderKind,
    data: bytes,
    settings: ExtractionSettings,
    file_name: str,
) -> DecodeAttempt:
    """Run one decoder under the timeout guard and record its outcome."""
    timeout = settings.timeout_seconds
    attempt = DecodeAttempt(decoder=decoder, deadline=time.monotonic() + timeout)
    decode = decode_text_layer if decoder is DecoderKind.PRIMARY else decode_pages

    started = time.monotonic()
    try:
        result = run_with_timeout(
            lambda abort: decode(data, abort), timeout, decoder.value
        )
        if decoder is DecoderKind.FALLBACK and is_probably_scanned(
            result.text, settings.scanned_text_threshold
        ):
            raise ExtractionError(
                ErrorKind.SCANNED_NO_TEXT,
                f"Likely scanned PDF: {len(result.text)} chars of text < "
                f"{settings.scanned_text_threshold} threshold",
            )
        attempt.result = result
    except ExtractionError as e:
        attempt.error = e
    except Exception as e:
        attempt.error = classify_decoder_error(e, decoder)

    elapsed = time.monotonic() - started
    if attempt.succeeded:
        logger.info(
            "%s decoder extracted %s in %.2fs (%d chars, %s pages)",
            decoder.value,
            file_name,
            elapsed,
            attempt.result.char_count,
            attempt.result.page_count,
        )
    else:
        logger.warning(
            "%s decoder failed for %s after %.2fs: %s (%s)",
            decoder.value,
            file_name,
            elapsed,
            attempt.error.kind.name,
            attempt.error.message,
        )
    return attempt


def extract_pdf(
    data: bytes,
    settings: ExtractionSettings,
    file_name: str = "document.pdf",
) -> ExtractionResult:
    """Extract text from a PDF using the primary -> fallback chain.

    Args:
        data: Raw PDF bytes.
        settings: Extraction configuration (fallback switch, time budget,
            scanned-text threshold).
        file_name: Original filename, for logs only.

    Returns:
        ExtractionResult from whichever decoder succeeded.

    Raises:
        ExtractionError: The primary's error when it is final or the
            fallback is disabled, otherwise the fallback's error.
    """
    # --- Primary: PyMuPDF text layer ---

    primary = _run_attempt(DecoderKind.PRIMARY, data, settings, file_name)
    if primary.succeeded:
        log_quality_warnings(primary.result.text, primary.result.page_count, file_name)
        return primary.result

    if not primary.error.recoverable:
        logger.warning(
            "Skipping fallback for %s: %s is not decoder-specific",
            file_name,
            primary.error.kind.name,
        )
        raise primary.error

    if not settings.enable_fallback:
        logger.info("Fallback disabled; surfacing primary error for %s", file_name)
        raise primary.error

    # --- Fallback: pdfplumber page walk ---

    logger.info(
        "Falling back to pdfplumber for %s after primary %s",
        file_name,
        primary.error.kind.name,
    )
    fallback = _run_attempt(DecoderKind.FALLBACK, data, settings, file_name)
    if fallback.succeeded:
        log_quality_warnings(
            fallback.result.text, fallback.result.page_count, file_name
        )
        return fallback.result

    raise fallback.error


def decoder_availability() -> dict[str, bool]:
    """Report which PDF decoding libraries can be imported."""
    return {
        DecoderKind.PRIMARY.value: pymupdf_extractor.is_available(),
        DecoderKind.FALLBACK.value: pdfplumber_extractor.is_available(),
    }
