"""Timing utilities for structured logging.

Wraps a block of client work (handshake, full pagination run) and logs how
long it took, using time.perf_counter() for sub-millisecond precision.
"""

import logging
import time
from contextlib import contextmanager
from typing import Optional


@contextmanager
def timed_operation(
    operation: str,
    logger: logging.Logger,
    level: int = logging.INFO,
    failure_level: int = logging.ERROR,
    extra: Optional[dict] = None,
):
    """Log the duration of the wrapped block as ``{operation}_completed``.

    The block may contain ``await``; only wall time between entry and exit is
    measured. On failure ``{operation}_failed`` is logged at ``failure_level``
    with the exception type and message, and the exception is re-raised.

    Args:
        operation: Event name prefix
        logger: Logger to write to
        level: Log level for the success event
        failure_level: Log level for the failure event
        extra: Additional context merged into both events

    Example:
        >>> logger = logging.getLogger("epitech_intra.auth")
        >>> with timed_operation("intra_authenticate", logger):
        ...     client = await builder.authenticate()

    Logs on success:
        {"level": "INFO", "message": "intra_authenticate_completed",
         "context": {"duration_ms": 145.23, "status": "success"}}
    """
    start = time.perf_counter()
    context = dict(extra or {})

    try:
        yield
    except Exception as e:
        context.update(
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            status="failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        logger.log(failure_level, f"{operation}_failed", extra=context)
        raise

    context.update(
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
        status="success",
    )
    logger.log(level, f"{operation}_completed", extra=context)
