"""Structured logging configuration for the Epitech intranet client.

- JSON structured logging with StructuredFormatter
- Logger hierarchy under the epitech_intra namespace
- Environment variable control (INTRA_LOG_LEVEL, INTRA_LOG_FORMAT)
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

ROOT_LOGGER = "epitech_intra"

# Extras under these keys never reach the output in clear: the autologin
# link and the session cookie both grant full access to the account.
SENSITIVE_KEYS = {
    "autologin", "cookie", "credential", "token", "secret",
    "password", "authorization", "session",
}

_STANDARD_FIELDS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}


class StructuredFormatter(logging.Formatter):
    """JSON log formatter.

    Outputs one JSON object per record with:
    - timestamp: UTC ISO 8601 format with 'Z' suffix
    - level: Log level name (INFO, ERROR, etc.)
    - logger: Logger name (epitech_intra hierarchy)
    - message: Log message (event name, e.g. intra_request_retry_limit)
    - context: Extras passed through ``extra=``, sensitive keys redacted
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            k: ("[REDACTED]" if k.lower() in SENSITIVE_KEYS else v)
            for k, v in record.__dict__.items()
            if k not in _STANDARD_FIELDS and not k.startswith("_")
        }
        if extras:
            log_data["context"] = extras

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter, selected with INTRA_LOG_FORMAT=text."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the epitech_intra logger hierarchy.

    Args:
        level: Optional log level override. If not provided, uses INTRA_LOG_LEVEL
               environment variable (default: INFO).

    Environment Variables:
        INTRA_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
        INTRA_LOG_FORMAT: Output format (json, text). Default: json
    """
    if level is None:
        level = os.getenv("INTRA_LOG_LEVEL", "INFO")

    log_level = getattr(logging, level.upper(), logging.INFO)

    if os.getenv("INTRA_LOG_FORMAT", "json").lower() == "text":
        formatter: logging.Formatter = TextFormatter()
    else:
        formatter = StructuredFormatter()

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)

    # Idempotent: repeated calls only adjust level and formatter
    if not logger.handlers:
        logger.addHandler(logging.StreamHandler())
    for handler in logger.handlers:
        handler.setFormatter(formatter)

    logger.propagate = False
