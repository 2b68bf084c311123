"""
Observability helpers for the Cloudlets SDK.

Provides:
- Structured logging with JSON format and correlation IDs
- Request correlation ID (request_id) generation and propagation

The SDK never configures logging on import; applications opt in by calling
``configure_structured_logging``.

Usage:
    from cloudlets.core.observability import (
        configure_structured_logging,
        get_logger,
        set_request_id,
    )
"""

import json
import logging
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

from cloudlets.core.config import settings

# Correlation ID - sent with every request and attached to every log record
_request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")


def generate_request_id() -> str:
    """Generate a unique request ID for correlation."""
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Get the current request ID from context."""
    return _request_id_ctx.get()


def set_request_id(request_id: str) -> None:
    """Set the request ID for the current context."""
    _request_id_ctx.set(request_id)


# Attributes every LogRecord carries; anything else came from `extra`
_RECORD_ATTRIBUTES = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs one JSON object per record with standard fields:
    - timestamp: ISO 8601 format
    - level: Log level
    - logger: Logger name
    - message: Log message
    - request_id: Correlation ID (if available)
    - exception: Exception type and message (if any)
    - extra: Any additional context from logging.extra
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None) or get_request_id()
        if request_id:
            log_entry["request_id"] = request_id

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
            }

        extra_keys = {
            k: v
            for k, v in record.__dict__.items()
            if k not in _RECORD_ATTRIBUTES and k != "request_id"
        }
        if extra_keys:
            log_entry["extra"] = extra_keys

        return json.dumps(log_entry, default=str)


def configure_structured_logging(level: str | None = None, structured: bool | None = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL),
            defaults to settings.cloudlets_log_level
        structured: Emit JSON records when True, plain text otherwise,
            defaults to settings.cloudlets_structured_logs
    """
    if level is None:
        level = settings.cloudlets_log_level
    if structured is None:
        structured = settings.cloudlets_structured_logs

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger; records pick up the current request ID when formatted."""
    return logging.getLogger(name)
