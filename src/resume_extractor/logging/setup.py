"""Logging for the extraction service.

Every extraction attempt leaves a trail: which decoder ran, how long its
budget was, whether it fell back, and the ErrorKind it ended with. That trail
goes to ``extraction.log`` as one JSON object per line so a batch can be
audited with ``jq``; the console gets a short text line per event.

Uploaded documents are personal data. Records carry file names, byte sizes,
page and character counts only, never extracted text.
"""

import logging
import logging.handlers
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

LOG_FILE_NAME = "extraction.log"

_JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(threadName)s %(message)s"
_CONSOLE_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"


def _level(value: int | str) -> int | str:
    # Settings files spell levels in lower case
    return value.upper() if isinstance(value, str) else value


def setup_logging(
    log_dir: str = "logs",
    log_level_file: int | str = logging.DEBUG,
    log_level_console: int | str = logging.INFO,
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
) -> None:
    """Route all extraction logs to a rotating JSON file and the console.

    Safe to call again (the CLI does so per run, tests per case): existing
    root handlers are dropped first, so records are never written twice.

    Args:
        log_dir: Directory that receives ``extraction.log``; created if absent.
        log_level_file: Level for the JSON file, number or name. DEBUG keeps
            per-page decoder progress.
        log_level_console: Level for the console, number or name.
        max_bytes: Rotate ``extraction.log`` past this size.
        backup_count: Rotated files to keep.
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    # "thread" tells primary and fallback attempts apart (decode-primary_0, ...)
    file_handler = logging.handlers.RotatingFileHandler(
        filename=str(log_path / LOG_FILE_NAME),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(_level(log_level_file))
    file_handler.setFormatter(
        JsonFormatter(
            fmt=_JSON_FIELDS,
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "component",
                "threadName": "thread",
            },
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(_level(log_level_console))
    console_handler.setFormatter(
        logging.Formatter(fmt=_CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
