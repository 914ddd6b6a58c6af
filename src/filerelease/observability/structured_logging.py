"""
Structured logging for filerelease.

JSON-formatted and human-readable formatters that stamp every record with the
correlation id and the fields of the active log context.

Correlation state lives in context variables, so it is scoped to the current
thread, asyncio task, or ``contextvars.copy_context()`` run rather than shared
across the process. ``asyncio.to_thread`` copies the caller's context, which
lets an HTTP request id follow the blocking file work into its worker thread.

Usage:
    from filerelease.observability import add_correlation_id, log_context

    with log_context(operation="manual_file_export", category="REDEMPTION"):
        logger.info("Manual export triggered")
"""

import json
import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from filerelease.utils.logging import ROOT_LOGGER_NAME, get_logger

logger = get_logger("filerelease.observability.logging")

SERVICE_NAME = "filerelease"

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_context_fields: ContextVar[dict[str, Any] | None] = ContextVar("log_context_fields", default=None)

# LogRecord attributes that are never copied into the JSON payload
_RESERVED_ATTRS = frozenset(
    {
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
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "message",
        "thread",
        "threadName",
        "taskName",
        "cid",
    }
)


def new_correlation_id() -> str:
    """Generate a short random correlation id."""
    return uuid.uuid4().hex[:12]


def get_correlation_id() -> str | None:
    """Return the correlation id of the current context, or None."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Set (or clear with None) the correlation id for the current context."""
    _correlation_id.set(correlation_id)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the fields bound by enclosing ``log_context`` blocks."""
    return dict(_context_fields.get() or {})


@contextmanager
def add_correlation_id(correlation_id: str | None = None) -> Iterator[str]:
    """
    Bind a correlation id for the duration of the block.

    Args:
        correlation_id: Correlation id (auto-generated if not provided)

    Yields:
        The correlation id in effect
    """
    cid = correlation_id or new_correlation_id()
    token = _correlation_id.set(cid)
    try:
        yield cid
    finally:
        _correlation_id.reset(token)


@contextmanager
def log_context(correlation_id: str | None = None, **fields: Any) -> Iterator[str]:
    """
    Bind structured fields (``operation``, ``category``, ...) to every record
    logged inside the block.

    An enclosing correlation id is kept unless one is passed explicitly; when
    there is none, a fresh id is generated. Fields from an enclosing block are
    inherited and may be overridden. Everything is restored on exit.

    Yields:
        The correlation id in effect
    """
    cid = correlation_id or get_correlation_id() or new_correlation_id()
    merged = {**(_context_fields.get() or {}), **fields}
    cid_token = _correlation_id.set(cid)
    fields_token = _context_fields.set(merged)
    try:
        yield cid
    finally:
        _context_fields.reset(fields_token)
        _correlation_id.reset(cid_token)


class StructuredFormatter(logging.Formatter):
    """
    JSON-formatted log formatter with structured fields.

    Each line carries timestamp, level, logger, message, service, correlation
    id, log-context fields, source location, exception info (if any) and any
    ``extra=`` fields passed at the call site.
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_location: bool = True,
        extra_fields: dict[str, Any] | None = None,
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_location = include_location
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON line."""
        log_data: dict[str, Any] = {}

        if self.include_timestamp:
            log_data["timestamp"] = datetime.fromtimestamp(record.created, UTC).isoformat()

        log_data["level"] = record.levelname
        log_data["logger"] = record.name
        log_data["message"] = record.getMessage()
        log_data["service"] = SERVICE_NAME

        correlation_id = get_correlation_id()
        if correlation_id:
            log_data["correlation_id"] = correlation_id

        log_data.update(get_log_context())

        if self.include_location:
            log_data["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        log_data.update(self.extra_fields)

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Human-readable formatter.

    Format: [timestamp] [level] [logger] [correlation_id] message key=value ...
    """

    def __init__(self, include_correlation_id: bool = True):
        super().__init__()
        self.include_correlation_id = include_correlation_id

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)

        parts = [f"[{timestamp}]", f"[{level}]", f"[{record.name}]"]

        if self.include_correlation_id:
            correlation_id = get_correlation_id()
            if correlation_id:
                parts.append(f"[{correlation_id}]")

        parts.append(record.getMessage())

        fields = get_log_context()
        if fields:
            parts.append(" ".join(f"{k}={v}" for k, v in fields.items()))

        message = " ".join(parts)

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_structured_logging(
    level: str = "INFO",
    json_format: bool = False,
    stream: Any = None,
    extra_fields: dict[str, Any] | None = None,
) -> None:
    """
    Route the ``filerelease`` logger tree to a single stream handler using
    the JSON or the human-readable formatter.

    Usage:
        setup_structured_logging(level="INFO", json_format=True)
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    level_int = getattr(logging, level.upper())
    root.setLevel(level_int)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level_int)

    formatter: logging.Formatter
    if json_format:
        formatter = StructuredFormatter(extra_fields=extra_fields)
    else:
        formatter = HumanReadableFormatter()

    handler.setFormatter(formatter)
    root.addHandler(handler)

    logger.debug(f"Structured logging configured: level={level}, json={json_format}")
