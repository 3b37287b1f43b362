"""Document text extraction: format dispatch and batch orchestration.

``extract_text`` is the service entry point for one upload. It enforces the
size limit, detects the format, and routes to the PDF engine or the TXT/DOCX
extractors. Size and format problems are raised before any decoder runs, and
anything unexpected is converted to ``UNKNOWN`` so callers only ever see a
classified ``ExtractionError``.

``extract_files`` runs ``extract_text`` over many files with per-document
error isolation: one file's failure does not block the others.

Public API:
    extract_text(request, settings) -> ExtractionResult
    extract_files(paths, settings)  -> ExtractionBatchResult
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from resume_extractor.config.settings import ExtractionSettings
from resume_extractor.extractor.docx_extractor import extract_docx_text
from resume_extractor.extractor.errors import (
    ClientError,
    ErrorKind,
    ExtractionError,
    to_client_error,
)
from resume_extractor.extractor.formats import detect_format
from resume_extractor.extractor.plaintext import extract_plain_text
from resume_extractor.extractor.service import extract_pdf
from resume_extractor.extractor.types import (
    DecoderKind,
    ExtractionRequest,
    ExtractionResult,
    SourceFormat,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ClientError",
    "DecoderKind",
    "ErrorKind",
    "ExtractionBatchResult",
    "ExtractionError",
    "ExtractionRequest",
    "ExtractionResult",
    "FileOutcome",
    "SourceFormat",
    "extract_files",
    "extract_text",
    "to_client_error",
]


def _check_size(request: ExtractionRequest, settings: ExtractionSettings) -> None:
    if request.size_bytes > settings.max_file_size_bytes:
        raise ExtractionError(
            ErrorKind.TOO_LARGE,
            f"File is {request.size_bytes} bytes; maximum is "
            f"{settings.max_file_size_bytes}",
        )


def _dispatch(
    request: ExtractionRequest, settings: ExtractionSettings
) -> ExtractionResult:
    _check_size(request, settings)
    source_format = detect_format(request.declared_mime, request.file_name)

    logger.debug(
        "Routing %s (%s, %d bytes) to %s extractor",
        request.file_name,
        request.declared_mime,
        request.size_bytes,
        source_format.value,
    )

    if source_format is SourceFormat.PDF:
        return extract_pdf(request.data, settings, file_name=request.file_name)

    if source_format is SourceFormat.DOCX:
        text = extract_docx_text(request.data)
    else:
        text = extract_plain_text(request.data)
    return ExtractionResult(text=text, source_format=source_format)


def extract_text(
    request: ExtractionRequest,
    settings: ExtractionSettings | None = None,
) -> ExtractionResult:
    """Extract normalized text from one uploaded document.

    Args:
        request: The upload (bytes, declared MIME, filename, size).
        settings: Extraction configuration; loaded from config/env if None.

    Returns:
        ExtractionResult with trimmed text and minimal metadata.

    Raises:
        ExtractionError: Always classified; see ``ErrorKind``.
    """
    if settings is None:
        settings = ExtractionSettings()

    try:
        result = _dispatch(request, settings)
    except ExtractionError as e:
        logger.warning(
            "Extraction failed for %s: %s (%s)",
            request.file_name,
            e.kind.name,
            e.message,
        )
        raise
    except Exception as e:
        logger.exception("Unexpected error extracting %s", request.file_name)
        raise ExtractionError(
            ErrorKind.UNKNOWN, f"Unexpected error: {type(e).__name__}: {e}"
        ) from e

    logger.info(
        "Extracted %s: %s, %d chars, %s pages",
        request.file_name,
        result.source_format.value,
        result.char_count,
        result.page_count,
    )
    return result


# ---------------------------------------------------------------------------
# Batch extraction
# ---------------------------------------------------------------------------


@dataclass
class FileOutcome:
    """Result of extracting one file in a batch: exactly one field is set."""

    path: Path
    result: ExtractionResult | None = None
    error: ClientError | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None


@dataclass
class ExtractionBatchResult:
    """Aggregated outcome of extracting text for multiple files."""

    files_attempted: int = 0
    files_succeeded: int = 0
    files_failed: int = 0
    outcomes: list[FileOutcome] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def extract_files(
    paths: list[Path],
    settings: ExtractionSettings,
) -> ExtractionBatchResult:
    """Extract text from each file independently.

    Unreadable files and classified extraction failures are recorded per file
    and the batch continues with the next one.

    Args:
        paths: Files to extract. MIME types are guessed from filenames.
        settings: Extraction configuration.

    Returns:
        ExtractionBatchResult with per-file outcomes and counters.
    """
    batch = ExtractionBatchResult()

    for idx, path in enumerate(paths, start=1):
        path = Path(path)
        batch.files_attempted += 1
        logger.info("Extracting file %d/%d: %s", idx, len(paths), path.name)

        try:
            request = ExtractionRequest.from_path(path)
            result = extract_text(request, settings)
        except ExtractionError as e:
            batch.files_failed += 1
            batch.outcomes.append(FileOutcome(path=path, error=to_client_error(e)))
            batch.errors.append(f"{path.name}: {e.kind.name}")
            continue
        except OSError as e:
            logger.warning("Cannot read %s: %s", path, e)
            batch.files_failed += 1
            client_error = to_client_error(
                ErrorKind.UNKNOWN, f"Cannot read file: {e.strerror or e}"
            )
            batch.outcomes.append(FileOutcome(path=path, error=client_error))
            batch.errors.append(f"{path.name}: unreadable")
            continue

        batch.files_succeeded += 1
        batch.outcomes.append(FileOutcome(path=path, result=result))

    logger.info(
        "Extraction batch complete: %d attempted, %d succeeded, %d failed",
        batch.files_attempted,
        batch.files_succeeded,
        batch.files_failed,
    )

    return batch
