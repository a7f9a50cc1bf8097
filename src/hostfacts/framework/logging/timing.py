"""
Timed, traced steps.

A ``Span`` measures one step (loading plugins, running one plugin) and links
to the span it is nested in. ``log_step`` wraps a block in a span, puts the
span into the log context and reports it:

    with log_step("plugin.run", plugin="Kernel", level="debug") as step:
        plugin.run()
        step.annotate(collectors=1)

emits ``plugin.run.start`` (DEBUG), then ``plugin.run.end`` at ``level`` with
``duration_ms``, or ``plugin.run.error`` (ERROR, with traceback) before the
exception continues.
"""

import secrets
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from hostfacts.framework.logging.context import context_scope, get_context, get_logger


def new_span_id() -> str:
    return secrets.token_hex(4)


@dataclass
class Span:
    """One timed step."""

    event: str
    parent_span_id: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)
    span_id: str = field(default_factory=new_span_id)
    failure: BaseException | None = None
    _started: float = field(default_factory=time.perf_counter, repr=False)
    _finished: float | None = field(default=None, repr=False)

    @property
    def finished(self) -> bool:
        return self._finished is not None

    @property
    def elapsed_ms(self) -> float:
        end = self._finished if self._finished is not None else time.perf_counter()
        return (end - self._started) * 1000

    def finish(self) -> "Span":
        if self._finished is None:
            self._finished = time.perf_counter()
        return self

    def annotate(self, **fields: Any) -> "Span":
        """Extra fields for the end (or error) event."""
        self.fields.update(fields)
        return self

    def summary(self, with_duration: bool = True) -> dict[str, Any]:
        result: dict[str, Any] = {"span_id": self.span_id}
        if self.parent_span_id:
            result["parent_span_id"] = self.parent_span_id
        if with_duration:
            result["duration_ms"] = round(self.elapsed_ms, 2)
        if self.failure is not None:
            result["error_type"] = type(self.failure).__name__
            result["error"] = str(self.failure)
        result.update(self.fields)
        return result


@contextmanager
def log_step(
    event: str,
    log_start: bool = True,
    level: str = "info",
    error_level: str = "error",
    **fields: Any,
) -> Iterator[Span]:
    """Run a block as a logged span; ``plugin``/``attribute`` fields also enter the log context.

    A failure is logged as ``<event>.error`` at ``error_level`` and re-raised.
    """
    log = get_logger("hostfacts.timing")
    step = Span(event, parent_span_id=get_context().span_id, fields=dict(fields))

    with context_scope(
        span_id=step.span_id,
        parent_span_id=step.parent_span_id,
        step=event,
        plugin=fields.get("plugin"),
        attribute=fields.get("attribute"),
    ):
        if log_start:
            log.debug(f"{event}.start", **step.summary(with_duration=False))
        try:
            yield step
        except Exception as e:
            step.failure = e
            step.finish()
            getattr(log, error_level)(f"{event}.error", exc_info=True, **step.summary())
            raise
        finally:
            step.finish()

    getattr(log, level)(f"{event}.end", **step.summary())
