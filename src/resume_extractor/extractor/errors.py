"""Error taxonomy for the extraction service.

Every failure leaving the service is an ``ExtractionError`` carrying exactly
one ``ErrorKind`` from a closed set. Two pure helpers sit on top of it:

- ``classify_decoder_error``: turns a raw exception thrown by a PDF decoding
  library into a classified ``ExtractionError`` by looking for known markers
  in the exception chain's type names and messages.
- ``to_client_error``: maps a kind to the fixed (status, code, message)
  triple the boundary layer returns to clients.

Kinds in ``RECOVERABLE_KINDS`` allow the PDF engine to try its fallback
decoder; every other kind is final for the request.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel

from resume_extractor.extractor.types import DecoderKind

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """Closed set of classified extraction failures."""

    PASSWORD_PROTECTED = "PASSWORD_PROTECTED"
    SCANNED_NO_TEXT = "SCANNED_NO_TEXT"
    INVALID_OR_CORRUPT = "INVALID_OR_CORRUPT"
    TOO_LARGE = "TOO_LARGE"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    TIMED_OUT = "TIMED_OUT"
    DECODER_UNAVAILABLE = "DECODER_UNAVAILABLE"
    UNKNOWN = "UNKNOWN"


RECOVERABLE_KINDS = frozenset(
    {
        ErrorKind.TIMED_OUT,
        ErrorKind.INVALID_OR_CORRUPT,
        ErrorKind.DECODER_UNAVAILABLE,
        ErrorKind.UNKNOWN,
    }
)


class ExtractionError(Exception):
    """A classified extraction failure.

    Attributes:
        kind: The failure kind.
        message: Internal, human-readable description (may include decoder
            detail; not meant for clients).
        recoverable: Whether a different decoding strategy might succeed.
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def recoverable(self) -> bool:
        return self.kind in RECOVERABLE_KINDS

    def __repr__(self) -> str:
        return f"ExtractionError({self.kind.name}, {self.message!r})"


# ---------------------------------------------------------------------------
# Decoder error classification
# ---------------------------------------------------------------------------

_PASSWORD_MARKERS = ("password", "encrypt")
_TOO_LARGE_MARKERS = ("too large", "file size")
_INVALID_MARKERS = (
    "invalid",
    "corrupt",
    "broken",
    "cannot open",
    "failed to open",
    "no objects found",
    "syntax",
    "no /root",
    "really a pdf",
    "not a pdf",
    "format error",
    "unexpected eof",
    "empty",
    "no text content",
)


def _describe(exc: BaseException) -> str:
    """Flatten an exception chain into one lower-cased marker haystack.

    pdfminer/pdfplumber frequently raise exceptions with empty messages whose
    meaning is in the class name (``PDFPasswordIncorrect``), or wrap the real
    exception as the first argument of another one, so type names, nested
    argument exceptions, and ``__cause__``/``__context__`` all contribute.
    """
    parts: list[str] = []
    seen: set[int] = set()
    pending: list[BaseException] = [exc]

    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))

        parts.append(type(current).__name__)
        parts.append(str(current))
        pending.extend(arg for arg in current.args if isinstance(arg, BaseException))
        if current.__cause__ is not None:
            pending.append(current.__cause__)
        if current.__context__ is not None:
            pending.append(current.__context__)

    return " ".join(parts).lower()


def classify_decoder_error(
    exc: BaseException, decoder: DecoderKind
) -> ExtractionError:
    """Map a raw decoder exception to a classified ExtractionError.

    An ``ExtractionError`` is returned unchanged. A missing decoding library
    (``ImportError``) is ``DECODER_UNAVAILABLE``. Otherwise markers are
    checked in order: password/encryption, size, invalid structure; anything
    unmatched is ``UNKNOWN`` (recoverable, so it remains eligible for the
    fallback decoder).

    Args:
        exc: Exception raised by a decoder attempt.
        decoder: Which decoder raised it (used in the message only).

    Returns:
        The classified error.
    """
    if isinstance(exc, ExtractionError):
        return exc

    label = decoder.value
    if isinstance(exc, ImportError):
        return ExtractionError(
            ErrorKind.DECODER_UNAVAILABLE,
            f"PDF decoder unavailable ({label}): {exc}",
        )

    haystack = _describe(exc)

    if any(marker in haystack for marker in _PASSWORD_MARKERS):
        kind = ErrorKind.PASSWORD_PROTECTED
    elif any(marker in haystack for marker in _TOO_LARGE_MARKERS):
        kind = ErrorKind.TOO_LARGE
    elif any(marker in haystack for marker in _INVALID_MARKERS):
        kind = ErrorKind.INVALID_OR_CORRUPT
    else:
        kind = ErrorKind.UNKNOWN

    return ExtractionError(kind, f"{label} decoder failed: {type(exc).__name__}: {exc}")


# ---------------------------------------------------------------------------
# Client mapping
# ---------------------------------------------------------------------------


class ClientError(BaseModel):
    """Boundary-layer response for a failed extraction."""

    status: int
    code: str
    message: str


_UNAVAILABLE = (503, "Processing temporarily unavailable; retry or use DOCX")

_CLIENT_ERRORS: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.SCANNED_NO_TEXT: (
        422,
        "PDF appears to be scanned images; upload a text-based PDF or DOCX",
    ),
    ErrorKind.PASSWORD_PROTECTED: (400, "Password-protected PDFs are not supported"),
    ErrorKind.INVALID_OR_CORRUPT: (400, "Invalid or corrupted PDF"),
    ErrorKind.TOO_LARGE: (413, "File exceeds maximum size"),
    ErrorKind.UNSUPPORTED_FORMAT: (400, "Unsupported file type"),
    ErrorKind.TIMED_OUT: _UNAVAILABLE,
    ErrorKind.DECODER_UNAVAILABLE: _UNAVAILABLE,
    ErrorKind.UNKNOWN: (500, "Failed to extract text"),
}


def to_client_error(
    error: ExtractionError | ErrorKind, message: str | None = None
) -> ClientError:
    """Map an error (or bare kind) to its fixed client response.

    The internal ``ExtractionError.message`` is deliberately not used; pass
    *message* to override the default text.
    """
    kind = error.kind if isinstance(error, ExtractionError) else error
    status, default_message = _CLIENT_ERRORS[kind]
    return ClientError(status=status, code=kind.name, message=message or default_message)
