"""Structured logging configuration."""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from src.core.config import settings

# Per-task logging context; concurrent requests never see each other's fields
_log_context: ContextVar[Dict[str, Any]] = ContextVar("promptbook_log_context", default={})


class PromptbookJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with Promptbook-specific fields."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = "promptbook"

        if record.pathname:
            log_record["file"] = f"{record.pathname}:{record.lineno}"

        # Remove redundant fields
        for field in ["asctime", "levelname", "name"]:
            log_record.pop(field, None)


class ContextFilter(logging.Filter):
    """Filter that adds context fields to log records."""

    @staticmethod
    def get_context() -> Dict[str, Any]:
        """Return a copy of the current context fields."""
        return dict(_log_context.get())

    @staticmethod
    def set_context(**kwargs) -> None:
        """Set context fields that will be added to all logs in this task."""
        context = dict(_log_context.get())
        context.update(kwargs)
        _log_context.set(context)

    @staticmethod
    def clear_context() -> None:
        """Clear all context fields."""
        _log_context.set({})

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context fields to the log record."""
        for key, value in _log_context.get().items():
            setattr(record, key, value)
        return True


def setup_logging(
    level: Optional[str] = None,
    format_type: Optional[str] = None,
) -> None:
    """
    Set up structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Output format ('json' or 'text')
    """
    level = level or settings.LOG_LEVEL
    format_type = format_type or settings.LOG_FORMAT

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))
    handler.addFilter(ContextFilter())

    if format_type.lower() == "json":
        formatter = PromptbookJsonFormatter(
            "%(timestamp)s %(level)s %(logger)s %(message)s",
            rename_fields={"levelname": "level", "name": "logger"},
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Set levels for noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


class LogContext:
    """Context manager for scoped logging context."""

    def __init__(self, **kwargs):
        self.context = kwargs
        self._token = None

    def __enter__(self):
        merged = dict(_log_context.get())
        merged.update(self.context)
        self._token = _log_context.set(merged)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _log_context.reset(self._token)
        return False


def log_event(
    logger: logging.Logger,
    level: int,
    message: str,
    prompt_id: Optional[str] = None,
    **extra,
) -> None:
    """
    Log a message with structured extra fields.

    Args:
        logger: Logger instance
        level: Log level
        message: Log message
        prompt_id: Optional saved prompt ID for tracing
        **extra: Additional fields to include
    """
    if prompt_id:
        extra["prompt_id"] = prompt_id
    logger.log(level, message, extra=extra)
