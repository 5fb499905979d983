"""
Logging configuration.

- **Console handler** — human-readable coloured output for local development.
- **Rotating JSON file** — machine-parsable log lines (``logs/investimentos.log``)
  plus an error-only stream (``logs/investimentos-error.log``) for alerting.
- **Request-ID correlation** — ``RequestIDMiddleware`` publishes the current
  request id to :data:`request_id_ctx`; :class:`RequestIDFilter` copies it onto
  every log record so repository and client logs can be traced back to the
  HTTP request that caused them.

Call ``setup_logging()`` once during application startup (in ``main.py``).
Modules log through ``logging.getLogger(__name__)``.
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from investimentos.core.config import settings

LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIDFilter(logging.Filter):
    """Attach the current request id (if any) to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_ctx.get()
        return True


class JSONFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Output example::

        {"timestamp": "2025-02-17T10:30:00.123Z", "level": "INFO",
         "logger": "investimentos.services.investor_service",
         "message": "Created investor 7 (Ana)", "module": "investor_service",
         "function": "create_investor", "line": 42, "request_id": "…"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = getattr(record, "request_id", None)
        if request_id:
            log_entry["request_id"] = request_id

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key in ("status_code", "method", "path", "elapsed_ms", "symbol", "entity"):
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val

        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter with ANSI-coloured levels."""

    COLOURS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        colour = self.COLOURS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S"
        )

        request_id = getattr(record, "request_id", None)
        rid_str = f" [{request_id[:8]}]" if request_id else ""

        base = (
            f"{timestamp} | {colour}{record.levelname:<8}{self.RESET} | "
            f"{record.name}{rid_str} | {record.getMessage()}"
        )
        if record.exc_info and record.exc_info[0] is not None:
            base += "\n" + self.formatException(record.exc_info)
        return base


def setup_logging() -> None:
    """
    Configure the root logger with console + rotating file handlers.

    Idempotent: returns early when the root logger already has handlers.

    Configuration (via ``Settings``):
    - ``DEBUG=true`` → all loggers at DEBUG, SQL echo enabled.
    - ``LOG_LEVEL`` → root log level otherwise (default: INFO).
    - ``LOG_FILE_MAX_BYTES`` / ``LOG_FILE_BACKUP_COUNT`` → rotation policy.
    """
    root_logger = logging.getLogger()

    if root_logger.handlers:
        return

    level = (
        logging.DEBUG
        if settings.DEBUG
        else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    )
    root_logger.setLevel(level)
    request_filter = RequestIDFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ConsoleFormatter())
    console_handler.addFilter(request_filter)
    root_logger.addHandler(console_handler)

    os.makedirs(LOG_DIR, exist_ok=True)
    file_handler = RotatingFileHandler(
        filename=os.path.join(LOG_DIR, "investimentos.log"),
        maxBytes=settings.LOG_FILE_MAX_BYTES,
        backupCount=settings.LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(JSONFormatter())
    file_handler.addFilter(request_filter)
    root_logger.addHandler(file_handler)

    error_handler = RotatingFileHandler(
        filename=os.path.join(LOG_DIR, "investimentos-error.log"),
        maxBytes=settings.LOG_FILE_MAX_BYTES,
        backupCount=settings.LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(JSONFormatter())
    error_handler.addFilter(request_filter)
    root_logger.addHandler(error_handler)

    # ── Suppress noisy third-party loggers ──
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if settings.DEBUG else logging.WARNING
    )

    root_logger.info(
        "Logging initialized — level=%s, file=%s, max_size=%s MB, backups=%d",
        logging.getLevelName(level),
        os.path.join(LOG_DIR, "investimentos.log"),
        settings.LOG_FILE_MAX_BYTES // (1024 * 1024),
        settings.LOG_FILE_BACKUP_COUNT,
    )
