"""Shared types for the extraction service.

Defines the request/result dataclasses and enums used by the format
dispatcher, the PDF engine, and the TXT/DOCX collaborators.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from resume_extractor.extractor.errors import ExtractionError


class SourceFormat(Enum):
    """Document format an extraction was routed to."""

    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"


class DecoderKind(Enum):
    """Which PDF decoder produced (or failed to produce) text."""

    PRIMARY = "primary"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ExtractionRequest:
    """A single uploaded document awaiting extraction.

    Attributes:
        data: Raw file bytes.
        declared_mime: MIME type reported by the uploader.
        file_name: Original filename (used for extension matching).
        size_bytes: Byte length reported by the upload boundary.
    """

    data: bytes = field(repr=False)
    declared_mime: str
    file_name: str
    size_bytes: int

    @classmethod
    def from_bytes(
        cls, data: bytes, declared_mime: str, file_name: str
    ) -> ExtractionRequest:
        return cls(
            data=data,
            declared_mime=declared_mime,
            file_name=file_name,
            size_bytes=len(data),
        )

    @classmethod
    def from_path(
        cls, path: Path | str, declared_mime: str | None = None
    ) -> ExtractionRequest:
        """Build a request from a file on disk.

        When no MIME type is given it is guessed from the filename, falling
        back to ``application/octet-stream`` so extension matching decides.
        """
        path = Path(path)
        if declared_mime is None:
            declared_mime = (
                mimetypes.guess_type(path.name)[0] or "application/octet-stream"
            )
        return cls.from_bytes(path.read_bytes(), declared_mime, path.name)


@dataclass
class ExtractionResult:
    """Normalized text extracted from one document.

    Attributes:
        text: Extracted text, trimmed. Never None.
        source_format: Format the document was routed to.
        page_count: Number of PDF pages, None for TXT/DOCX.
        decoder: PDF decoder that produced the text, None for TXT/DOCX.
    """

    text: str
    source_format: SourceFormat
    page_count: int | None = None
    decoder: DecoderKind | None = None

    @property
    def char_count(self) -> int:
        return len(self.text)


@dataclass
class DecodeAttempt:
    """One run of a PDF decoder under a deadline. Internal to the engine."""

    decoder: DecoderKind
    deadline: float  # time.monotonic() instant
    result: ExtractionResult | None = None
    error: ExtractionError | None = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None
