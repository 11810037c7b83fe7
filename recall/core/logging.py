"""Structured logging configuration for Recall Engine."""

import logging
import sys
from enum import Enum
from typing import Any

# Record attributes emitted right after the message, in this order
CONTEXT_FIELDS = ("user_id", "entity_id", "score_key", "kind")


def _render(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    text = str(value)
    # Quote values that would otherwise split into several key=value pairs
    if not text or any(c.isspace() for c in text) or '"' in text:
        return '"' + text.replace('"', '\\"') + '"'
    return text


class StructuredFormatter(logging.Formatter):
    """Key=value structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured output."""
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.module,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        line = " ".join(f"{k}={_render(v)}" for k, v in log_data.items())
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

        try:
            from recall.core.config import get_settings

            settings = get_settings()
            logger.setLevel(logging.DEBUG if settings.RECALL_ENV == "dev" else logging.INFO)
        except Exception:
            # Settings fail to load without Supabase credentials
            logger.setLevel(logging.INFO)

    return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, **kwargs: Any) -> None:
    """
    Log with Recall context fields.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        msg: Log message
        **kwargs: user_id, entity_id, score_key and kind become record
            attributes; anything else is appended as extra key=value pairs
    """
    extra: dict[str, Any] = {field: kwargs.pop(field) for field in CONTEXT_FIELDS if field in kwargs}
    extra["extra_data"] = kwargs

    logger.log(level, msg, extra=extra)
