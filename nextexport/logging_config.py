"""
nextexport - Logging Configuration
==================================
Console and JSON logging for the command-line tools.

Features:
- Short prefixed console lines (``error - message``) for interactive use
- JSON output for log aggregation when ``LOG_FORMAT=json``
- Active trace span name attached to every record
- Log level filtering via settings
- Structured events with extra fields (``log_event``)

Usage:
    from nextexport.logging_config import configure_logging, get_logger, log_event

    configure_logging()
    get_logger(__name__).info("Exporting")
    log_event("export_completed", pages=3)
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any

from nextexport.config import get_settings

# =============================================================================
# Span Context (async-safe)
# =============================================================================

_span_name_ctx: ContextVar[str | None] = ContextVar("span_name", default=None)


class SpanContext:
    """Context-local name of the trace span that is currently active."""

    @staticmethod
    def get() -> str | None:
        return _span_name_ctx.get()

    @staticmethod
    def activate(name: str | None):
        """Set the active span name; returns a token for ``reset``."""
        return _span_name_ctx.set(name)

    @staticmethod
    def reset(token) -> None:
        _span_name_ctx.reset(token)


class SpanContextFilter(logging.Filter):
    """Attach the active span name to each record as ``span``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "span"):
            record.span = SpanContext.get()
        return True


# =============================================================================
# JSON Formatter
# =============================================================================


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs in a consistent JSON format with timestamps,
    log levels, and contextual fields.
    """

    _STANDARD_ATTRS = frozenset(
        {
            "name", "msg", "args", "levelname", "levelno", "pathname",
            "filename", "module", "lineno", "funcName", "created", "msecs",
            "relativeCreated", "thread", "threadName", "processName",
            "process", "getMessage", "exc_info", "exc_text", "stack_info",
            "taskName", "span", "message", "asctime",
        }
    )

    def __init__(self, *, service_name: str = "nextexport") -> None:
        super().__init__()
        self.service_name = service_name
        self._iso_format = "%Y-%m-%dT%H:%M:%S.%fZ"

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
        }

        span = getattr(record, "span", None)
        if span:
            log_entry["span"] = span

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": "".join(traceback.format_exception(*record.exc_info)),
            }

        for key, value in record.__dict__.items():
            if key not in self._STANDARD_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        return json.dumps(log_entry, default=self._json_serializer, ensure_ascii=False)

    def _format_timestamp(self, created: float) -> str:
        dt = datetime.fromtimestamp(created, tz=timezone.utc)
        return dt.strftime(self._iso_format)

    @staticmethod
    def _json_serializer(obj: Any) -> str:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Path):
            return str(obj)
        return str(obj)


# =============================================================================
# Console Formatter
# =============================================================================


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for terminal output.

    Renders ``<prefix> - <message>``, e.g. ``error - Export failed``.
    """

    LEVEL_PREFIXES = {
        "DEBUG": ("debug", "\033[90m"),    # Grey
        "INFO": ("info", "\033[36m"),      # Cyan
        "WARNING": ("warn", "\033[33m"),   # Yellow
        "ERROR": ("error", "\033[31m"),    # Red
        "CRITICAL": ("error", "\033[35m"),  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, *, use_color: bool = False) -> None:
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        prefix, color = self.LEVEL_PREFIXES.get(record.levelname, ("info", ""))
        if self.use_color:
            prefix = f"{color}{prefix}{self.RESET}"
        base = f"{prefix} - {record.getMessage()}"

        if record.exc_info:
            base += "\n" + "".join(traceback.format_exception(*record.exc_info))

        return base


# =============================================================================
# Setup
# =============================================================================

_handler: logging.Handler | None = None


def _convert_level(level: str | int) -> int:
    """Convert log level string to int constant."""
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def configure_logging(
    *,
    level: str | int | None = None,
    log_format: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """
    Install the nextexport handler on the root logger.

    Calling this again replaces the handler installed by the previous
    call; handlers added by other code are left in place.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format type ("json" or "console")
        stream: Output stream (defaults to stderr)
    """
    global _handler

    settings = get_settings()
    resolved_level = _convert_level(settings.log_level if level is None else level)
    use_json = (log_format or settings.log_format) == "json"
    stream = stream or sys.stderr

    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved_level)
    handler.addFilter(SpanContextFilter())
    if use_json:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(ConsoleFormatter(use_color=stream.isatty()))

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    root.setLevel(resolved_level)
    _handler = handler
    return handler


_loggers: dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger.

    Loggers are cached by name. Output still goes through the handler
    installed by ``configure_logging``; nothing is printed before that.

    Args:
        name: Logger name (usually __name__)
    """
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)
    return _loggers[name]


# =============================================================================
# Helper Functions
# =============================================================================


def log_event(
    event_name: str,
    level: str | int = "info",
    *,
    logger_name: str = "nextexport.event",
    **extra_fields: Any,
) -> None:
    """
    Log a structured event with additional fields.

    The active span name is recorded as ``span`` unless given explicitly.

    Example:
        log_event("span_completed", "debug", duration_ms=45)
    """
    extra_fields.setdefault("span", SpanContext.get())
    get_logger(logger_name).log(_convert_level(level), event_name, extra=extra_fields)
