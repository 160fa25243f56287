"""Logging context: correlation IDs plus the operation and record in flight.

Backed by ``contextvars`` so nested operations restore the outer context
when they finish.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any


@dataclass
class LogContext:
    """Holds contextual information for logging."""

    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    operation: str | None = None
    record_id: str | None = None
    component: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for log enrichment."""
        result: dict[str, Any] = {"correlation_id": self.correlation_id}

        if self.operation:
            result["operation"] = self.operation
        if self.record_id:
            result["record_id"] = self.record_id
        if self.component:
            result["component"] = self.component

        result.update(self.extra)
        return result


_log_context: ContextVar[LogContext | None] = ContextVar("log_context", default=None)


def get_context() -> LogContext:
    """Get the current log context, creating a new one if none exists."""
    ctx = _log_context.get()
    if ctx is None:
        ctx = LogContext()
        _log_context.set(ctx)
    return ctx


def clear_context() -> None:
    _log_context.set(None)


def get_correlation_id() -> str:
    return get_context().correlation_id


class ContextManager:
    """Installs a LogContext for the duration of a ``with`` block.

    A nested block inherits the enclosing correlation ID unless one is
    given, so every log line of a CLI command shares one ID.
    """

    def __init__(
        self,
        correlation_id: str | None = None,
        operation: str | None = None,
        record_id: str | None = None,
        component: str | None = None,
        **extra: Any,
    ) -> None:
        self._requested_id = correlation_id
        self._fields = {"operation": operation, "record_id": record_id, "component": component}
        self._extra = extra
        self._token: Any = None

    def __enter__(self) -> LogContext:
        outer = _log_context.get()
        correlation_id = self._requested_id or (outer.correlation_id if outer else str(uuid.uuid4()))
        context = LogContext(correlation_id=correlation_id, extra=dict(self._extra), **self._fields)
        if outer and context.component is None:
            context.component = outer.component
        self._token = _log_context.set(context)
        return context

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        _log_context.reset(self._token)


def with_context(
    correlation_id: str | None = None,
    operation: str | None = None,
    record_id: str | None = None,
    component: str | None = None,
    **extra: Any,
) -> ContextManager:
    """Create a context manager with the specified logging context.

    Usage:
        with with_context(operation="delete", record_id="S1"):
            logger.info("Deleting record")
    """
    return ContextManager(
        correlation_id=correlation_id,
        operation=operation,
        record_id=record_id,
        component=component,
        **extra,
    )


def update_context(**kwargs: Any) -> None:
    """Update the current context with additional fields."""
    ctx = get_context()
    for key, value in kwargs.items():
        if hasattr(ctx, key) and key != "extra":
            setattr(ctx, key, value)
        else:
            ctx.extra[key] = value
