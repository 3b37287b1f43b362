"""Deadline enforcement for a single decoder attempt.

``run_with_timeout`` runs the attempt on its own worker thread and waits for
at most the attempt's budget. PDF libraries offer no way to interrupt a call
in progress, so on expiry the guard only stops waiting: it sets the attempt's
abort event, raises ``TIMED_OUT`` and shuts the worker pool down without
joining it. Decoders poll the event between pages via ``check_aborted`` and
release their handles when they see it; a library call that never returns
keeps its thread until it does.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, TypeVar

from resume_extractor.extractor.errors import ErrorKind, ExtractionError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def check_aborted(abort: threading.Event, label: str) -> None:
    """Raise TIMED_OUT if the guard has already given up on this attempt."""
    if abort.is_set():
        logger.debug("Decoder %s observed abort signal, stopping", label)
        raise ExtractionError(
            ErrorKind.TIMED_OUT, f"PDF parsing aborted after deadline ({label})"
        )


def run_with_timeout(
    func: Callable[[threading.Event], T],
    timeout_seconds: float,
    label: str,
) -> T:
    """Run *func* with a deadline.

    Args:
        func: The attempt. Receives the abort event it should poll.
        timeout_seconds: Budget for this attempt alone.
        label: Attempt name for logs and the timeout message.

    Returns:
        Whatever *func* returns, if it finishes in time.

    Raises:
        ExtractionError: ``TIMED_OUT`` when the deadline passes first.
        Exception: Anything *func* raises, unchanged.
    """
    abort = threading.Event()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"decode-{label}")
    future = executor.submit(func, abort)

    try:
        return future.result(timeout=timeout_seconds)
    except FutureTimeoutError:
        # Builtin TimeoutError raised by func itself, not the deadline
        if future.done():
            raise
        abort.set()
        future.cancel()
        logger.warning(
            "Decoder %s exceeded %.1fs budget, abandoning attempt",
            label,
            timeout_seconds,
        )
        raise ExtractionError(
            ErrorKind.TIMED_OUT,
            f"PDF parsing timed out ({label}) after {timeout_seconds:.1f}s",
        ) from None
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
