"""Résumé text extraction -- command-line entry point.

Startup sequence:
    1. Load logging configuration (needed for log_dir and rotation)
    2. Setup logging (must happen before any code that logs)
    3. Load extraction configuration, applying command-line overrides
    4. Extract each file and print one JSON line per file

Usage:
    python main.py resume.pdf job.docx [--no-fallback] [--timeout 10]
    python main.py --check
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from resume_extractor.config import ExtractionSettings, LoggingSettings
from resume_extractor.extractor import FileOutcome, extract_files
from resume_extractor.extractor.service import decoder_availability
from resume_extractor.logging import setup_logging

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract plain text from PDF, DOCX and TXT documents."
    )
    parser.add_argument("files", nargs="*", type=Path, help="documents to extract")
    parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="do not retry failed PDFs with the fallback decoder",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="seconds allowed per PDF decoder attempt",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="report which PDF decoders are available and exit",
    )
    return parser.parse_args(argv)


def _outcome_to_json(outcome: FileOutcome) -> str:
    record: dict = {"file": str(outcome.path), "ok": outcome.ok}
    if outcome.ok:
        result = outcome.result
        record.update(
            source_format=result.source_format.value,
            page_count=result.page_count,
            decoder=result.decoder.value if result.decoder else None,
            char_count=result.char_count,
            text=result.text,
        )
    else:
        record["error"] = outcome.error.model_dump()
    return json.dumps(record, ensure_ascii=False)


def main(argv: list[str] | None = None) -> int:
    """Run extraction for the files named on the command line."""
    args = _parse_args(argv)

    # 1-2. Logging first
    logging_settings = LoggingSettings()
    setup_logging(
        log_dir=logging_settings.log_dir,
        log_level_console=logging_settings.console_level,
        max_bytes=logging_settings.log_max_bytes,
        backup_count=logging_settings.log_backup_count,
    )

    if args.check:
        availability = decoder_availability()
        print(json.dumps(availability))
        return 0 if all(availability.values()) else 1

    if not args.files:
        logger.error("No files given")
        return 2

    # 3. Extraction config with CLI overrides
    overrides: dict = {}
    if args.no_fallback:
        overrides["enable_fallback"] = False
    if args.timeout is not None:
        overrides["timeout_seconds"] = args.timeout
    settings = ExtractionSettings(**overrides)

    logger.info(
        "Config loaded -- extraction: fallback=%s, timeout=%ss, "
        "scanned_threshold=%s, max_bytes=%s",
        settings.enable_fallback,
        settings.timeout_seconds,
        settings.scanned_text_threshold,
        settings.max_file_size_bytes,
    )

    # 4. Extract
    batch = extract_files(args.files, settings)
    for outcome in batch.outcomes:
        print(_outcome_to_json(outcome))

    return 1 if batch.files_failed else 0


if __name__ == "__main__":
    sys.exit(main())
