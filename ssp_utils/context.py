"""
Per-solve log context: every record gets the instance id and solver backend
of the solve it was emitted from. One ContextVar holds both, and it is
reset by token on exit, so nested or concurrent solves never see each
other's ids.
"""
import logging
from contextvars import ContextVar
from contextlib import contextmanager
from types import MappingProxyType
from typing import Mapping, Optional

LOG_FIELDS = ("instance_id", "backend")

_EMPTY: Mapping[str, str] = MappingProxyType({})
_solve_context: ContextVar[Mapping[str, str]] = ContextVar("ssp_solve_context", default=_EMPTY)


class LogContextFilter(logging.Filter):
    """Stamp LOG_FIELDS onto each record ("-" outside a solve)."""
    def filter(self, record: logging.LogRecord) -> bool:
        ctx = _solve_context.get()
        for name in LOG_FIELDS:
            setattr(record, name, ctx.get(name, "-"))
        return True


@contextmanager
def instance_context(instance_id: str, backend: Optional[str] = None):
    ctx = dict(_solve_context.get())
    ctx["instance_id"] = str(instance_id)
    if backend is not None:
        ctx["backend"] = str(backend)
    token = _solve_context.set(MappingProxyType(ctx))
    try:
        yield
    finally:
        _solve_context.reset(token)
