"""
Session-aware log context.

Everything known about *where* a log event comes from (the collection
session, the plugin being executed, the current step and its span) lives in
one ContextVar. ``add_context_processor`` copies it into every structlog
event, so collector code can log without threading identifiers through.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

import structlog


@dataclass(frozen=True)
class LogContext:
    """Identifiers attached to every log event of a collection session."""

    session_id: str | None = None
    plugin: str | None = None
    attribute: str | None = None
    step: str | None = None
    span_id: str | None = None
    parent_span_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}

    def merge(self, **values: Any) -> "LogContext":
        """Copy with the known, non-None ``values`` applied."""
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in values.items() if k in known and v is not None})


_EMPTY = LogContext()
_current: ContextVar[LogContext] = ContextVar("hostfacts_log_context", default=_EMPTY)


def get_context() -> LogContext:
    return _current.get()


def bind_context(**values: Any) -> LogContext:
    """Merge ``values`` into the context for the rest of the current task."""
    updated = get_context().merge(**values)
    _current.set(updated)
    return updated


def clear_context() -> None:
    _current.set(_EMPTY)


@contextmanager
def context_scope(**values: Any) -> Iterator[LogContext]:
    """Merge ``values`` into the context until the block exits.

    Usage:
        with context_scope(plugin="Kernel"):
            collect()
    """
    token = _current.set(get_context().merge(**values))
    try:
        yield _current.get()
    finally:
        _current.reset(token)


def add_context_processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor: fill in context fields the event does not set itself."""
    for key, value in get_context().to_dict().items():
        event_dict.setdefault(key, value)
    return event_dict


def get_logger(name: str | None = None) -> Any:
    """structlog logger, normally ``get_logger(__name__)``."""
    return structlog.get_logger(name)
