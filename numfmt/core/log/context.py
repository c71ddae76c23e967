"""Context helpers that enrich log records with structured metadata."""
from __future__ import annotations

import contextvars
import logging

_context_var: contextvars.ContextVar[dict[str, object]] = contextvars.ContextVar(
    "numfmt_log_context", default={}
)


class LogContext:
    """Bind key-value pairs that are appended to subsequent log records."""

    def bind(self, **values: object) -> None:
        current = dict(_context_var.get())
        current.update({k: v for k, v in values.items() if v is not None})
        _context_var.set(current)

    def unbind(self, *keys: str) -> None:
        current = dict(_context_var.get())
        for key in keys:
            current.pop(key, None)
        _context_var.set(current)


class ContextFilter(logging.Filter):
    """Render bound context as a ``key=value`` prefix on ``record.context``."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _context_var.get()
        if context:
            record.context = " ".join(f"{k}={v}" for k, v in context.items()) + " "
        else:
            record.context = ""
        return True


log_context = LogContext()
