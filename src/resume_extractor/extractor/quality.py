"""Text normalization and quality heuristics for extracted PDF text.

Two normalizations, one per decoder:

- ``clean_text_layer``: line-preserving cleanup for the primary decoder.
- ``collapse_whitespace``: single-space flattening for the fallback decoder.

``is_probably_scanned`` is the scanned-PDF heuristic: a cleaned text layer
shorter than the configured threshold almost always means the pages are
images. It is a heuristic boundary and can misclassify very short documents.

``log_quality_warnings`` only reports; it never changes an outcome.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# Matches Unicode replacement char, NULL, and non-printable control chars
_GARBLE_PATTERN = re.compile(r"[\ufffd\x00-\x08\x0b\x0c\x0e-\x1f]")
_LETTER_PATTERN = re.compile(r"[^\W\d_]")
_WHITESPACE_RUN = re.compile(r"\s+")
_INLINE_WHITESPACE_RUN = re.compile(r"[ \t\f\v]+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")

_GARBLE_WARN_RATIO = 0.05
_MIN_LETTERS = 20
_MIN_CHARS_PER_PAGE = 50


def clean_text_layer(raw_text: str) -> str:
    """Normalize text-layer output while keeping line structure.

    Line breaks are unified to ``\\n``, runs of spaces/tabs become one space,
    each line is trimmed, three or more newlines shrink to a blank line, and
    the result is trimmed.
    """
    if not raw_text:
        return ""

    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")
    text = _INLINE_WHITESPACE_RUN.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()


def collapse_whitespace(raw_text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return _WHITESPACE_RUN.sub(" ", raw_text or "").strip()


def is_probably_scanned(text: str, threshold: int) -> bool:
    """True when cleaned text is too short to be a real text layer."""
    return len(text) < threshold


def garble_ratio(text: str) -> float:
    """Fraction of replacement / control characters in *text*."""
    if not text:
        return 0.0
    return len(_GARBLE_PATTERN.findall(text)) / len(text)


def log_quality_warnings(text: str, page_count: int | None, file_name: str) -> None:
    """Log suspicious-looking extraction output.

    Checks the garble ratio (font-mapping problems), the letter count
    (text layers made of page numbers or symbols only) and the average text
    per page (mostly-image documents with a thin text layer).
    """
    ratio = garble_ratio(text)
    if ratio > _GARBLE_WARN_RATIO:
        logger.warning(
            "Extracted text for %s looks garbled: %.3f replacement/control "
            "char ratio (%d chars, %s pages)",
            file_name,
            ratio,
            len(text),
            page_count,
        )

    letters = len(_LETTER_PATTERN.findall(text))
    if letters < _MIN_LETTERS:
        logger.warning(
            "Extracted text for %s has only %d letters; document may be "
            "mostly images",
            file_name,
            letters,
        )

    if page_count:
        per_page = len(text) / page_count
        if per_page < _MIN_CHARS_PER_PAGE:
            logger.warning(
                "Extracted text for %s averages %.0f chars per page over %d "
                "pages; some pages may be scanned",
                file_name,
                per_page,
                page_count,
            )
