"""
Lightweight tracing spans.

A span measures one named interval of work. It is started when created and
must be stopped exactly once; using it as a context manager guarantees that
on every exit path:

    with trace("next-export-cli") as span:
        with span.child("copy-public"):
            ...

Finished spans are passed to the registered reporters.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable
from typing import Any

from nextexport.logging_config import SpanContext, get_logger, log_event

logger = get_logger(__name__)

Reporter = Callable[["Span"], None]

_reporters: list[Reporter] = []


class Span:
    """A named, explicitly stopped interval of work."""

    def __init__(
        self,
        name: str,
        *,
        parent: Span | None = None,
        attrs: dict[str, Any] | None = None,
    ) -> None:
        self.name = name
        self.parent = parent
        self.id = uuid.uuid4().hex[:16]
        self.attrs: dict[str, Any] = dict(attrs or {})
        self.children: list[Span] = []
        self._start_time = time.perf_counter()
        self._end_time: float | None = None
        self._token = None

    @property
    def stopped(self) -> bool:
        return self._end_time is not None

    @property
    def duration_ms(self) -> float | None:
        if self._end_time is None:
            return None
        return round((self._end_time - self._start_time) * 1000, 2)

    def set_attribute(self, key: str, value: Any) -> None:
        self.attrs[key] = value

    def child(self, name: str, *, attrs: dict[str, Any] | None = None) -> Span:
        span = Span(name, parent=self, attrs=attrs)
        self.children.append(span)
        return span

    def stop(self) -> None:
        """Stop the span and report it. Later calls are ignored."""
        if self._end_time is not None:
            logger.debug("Span %s already stopped", self.name)
            return
        self._end_time = time.perf_counter()
        for reporter in list(_reporters):
            reporter(self)

    def __enter__(self) -> Span:
        self._token = SpanContext.activate(self.name)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.set_attribute("error", exc_type.__name__)
        if self._token is not None:
            SpanContext.reset(self._token)
            self._token = None
        self.stop()

    def __repr__(self) -> str:
        return f"Span(name={self.name!r}, stopped={self.stopped})"


def trace(name: str, *, parent: Span | None = None, attrs: dict[str, Any] | None = None) -> Span:
    """Start a span; a ``parent`` makes it a child span."""
    if parent is not None:
        return parent.child(name, attrs=attrs)
    return Span(name, attrs=attrs)


def add_reporter(reporter: Reporter) -> None:
    if reporter not in _reporters:
        _reporters.append(reporter)


def remove_reporter(reporter: Reporter) -> None:
    if reporter in _reporters:
        _reporters.remove(reporter)


def log_reporter(span: Span) -> None:
    """Report a finished span as a debug log record."""
    log_event(
        "span_completed",
        "debug",
        logger_name=__name__,
        span_name=span.name,
        span_id=span.id,
        parent_id=span.parent.id if span.parent else None,
        duration_ms=span.duration_ms,
        **{f"attr_{key}": value for key, value in span.attrs.items()},
    )
