"""Structured logging configuration for the scheduling core.

This module provides:
- JSON structured logging for files and production consoles
- Colored console output for development
- Rotating file handler (10MB max, 5 backups)
- ``LogContext`` for attaching channel/tenant context to a block of log calls

Services attach diagnostic values through ``extra={"context": {...}}``;
both formatters render that mapping.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar, Token
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, ClassVar

from channel_scheduler.core.config import settings


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Format:
        {
            "timestamp": "2024-01-01T06:00:00.123Z",
            "level": "WARNING",
            "logger": "channel_scheduler.services.schedule.applier",
            "message": "Skipping conflicting candidate",
            "service": "Channel Scheduler",
            "context": {
                "channel_id": "123e4567-e89b-12d3-a456-426614174000",
                "start": "2024-01-01T06:00:00+00:00"
            }
        }

    Context values that are not JSON-native (UUIDs, datetimes) are
    rendered with ``str``.
    """

    def __init__(self, service_name: str = "Channel Scheduler") -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
        }

        context = record_context(record)
        if context:
            log_entry["context"] = context

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        # Source location only for ERROR and above
        if record.levelno >= logging.ERROR:
            log_entry["source"] = {
                "function": record.funcName,
                "line": record.lineno,
                "file": record.pathname,
            }

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ColoredConsoleFormatter(logging.Formatter):
    """Colored, human-readable console formatter for development."""

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[41m",  # Red background
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors and inline context."""
        # Work on a copy so other handlers see the untouched record
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"

        context = record_context(record)
        if context:
            record.msg = f"{record.getMessage()} | Context: {json.dumps(context, default=str)}"
            record.args = None

        return super().format(record)


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    service_name: str | None = None,
    enable_json: bool | None = None,
    enable_console: bool = True,
) -> logging.Logger:
    """Configure root logging with file and console handlers.

    Args:
        log_level: Logging level name. Defaults to settings.LOG_LEVEL
        log_file: Path to log file. Defaults to settings.LOG_FILE,
                  then logs/app.log
        service_name: Service name stamped on JSON records.
                      Defaults to settings.PROJECT_NAME
        enable_json: Use the JSON formatter for the file handler.
                     Defaults to settings.LOG_JSON_FORMAT
        enable_console: Attach a stdout handler

    Returns:
        Configured root logger instance

    Examples:
        >>> logger = setup_logging(log_level="INFO")
        >>> logger.info("Scheduler ready", extra={"context": {"tz": "UTC"}})
    """
    if log_level is None:
        log_level = settings.LOG_LEVEL
    if service_name is None:
        service_name = settings.PROJECT_NAME
    if log_file is None:
        log_file = settings.LOG_FILE
    if enable_json is None:
        enable_json = settings.LOG_JSON_FORMAT

    log_file_path: Path
    if log_file is None:
        log_file_path = Path("logs") / "app.log"
    else:
        log_file_path = Path(log_file)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = RotatingFileHandler(
        filename=str(log_file_path),
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    if enable_json:
        file_handler.setFormatter(JSONFormatter(service_name=service_name))
    else:
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    logger.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        if settings.DEBUG:
            console_handler.setFormatter(ColoredConsoleFormatter())
        else:
            console_handler.setFormatter(JSONFormatter(service_name=service_name))
        logger.addHandler(console_handler)

    logger.info(
        "Logging initialized - Level: %s, File: %s",
        log_level,
        log_file_path,
        extra={
            "context": {
                "log_level": log_level,
                "log_file": str(log_file_path),
                "service": service_name,
            }
        },
    )

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    Examples:
        >>> from channel_scheduler.core.logging import get_logger
        >>> logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Merge block-level ``LogContext`` values with per-call ``extra`` context.

    Per-call values win on key collisions.
    """
    scoped = getattr(record, "scope_context", None) or {}
    explicit = getattr(record, "context", None) or {}
    return {**scoped, **explicit}


# Block-level context of the running task; each asyncio task sees its own copy
_scope_context: ContextVar[dict[str, Any] | None] = ContextVar(
    "log_scope_context", default=None
)


def _install_scope_factory() -> None:
    """Wrap the current record factory once so records pick up the scope."""
    base_factory = logging.getLogRecordFactory()
    if getattr(base_factory, "scope_aware", False):
        return

    def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
        record = base_factory(*args, **kwargs)
        scope = _scope_context.get()
        if scope:
            record.scope_context = scope
        return record

    record_factory.scope_aware = True  # type: ignore[attr-defined]
    logging.setLogRecordFactory(record_factory)


class LogContext:
    """Attach structured context to every record created inside a block.

    Values are stored on ``record.scope_context`` so that calls inside the
    block can still pass ``extra={"context": ...}``. The scope lives in a
    context variable, so concurrent tasks awaiting inside their own blocks
    never see each other's values. Nested blocks merge, inner values win.

    Examples:
        >>> logger = get_logger(__name__)
        >>> with LogContext(channel_id="...", template_id="news-morning"):
        ...     logger.info("Applying template")
    """

    def __init__(self, **context: Any) -> None:
        self.context = context
        self._token: Token[dict[str, Any] | None] | None = None

    def __enter__(self) -> LogContext:
        _install_scope_factory()
        outer = _scope_context.get() or {}
        self._token = _scope_context.set({**outer, **self.context})
        return self

    def __exit__(self, *args: Any) -> None:
        if self._token is not None:
            _scope_context.reset(self._token)
            self._token = None


__all__ = [
    "ColoredConsoleFormatter",
    "JSONFormatter",
    "LogContext",
    "get_logger",
    "record_context",
    "setup_logging",
]
