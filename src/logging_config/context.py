"""Calculation Context Management.

Context-local binding of calculation IDs, snapshot IDs and the input
source (form, alert, journal edit) so every log line emitted while
handling one calculation can be correlated.
"""

import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


_calc_id_var: ContextVar[str] = ContextVar("calc_id", default="")
_snapshot_id_var: ContextVar[str] = ContextVar("snapshot_id", default="")
_source_var: ContextVar[str] = ContextVar("source", default="")
_extra_context_var: ContextVar[dict] = ContextVar("extra_context", default={})


def generate_calc_id() -> str:
    """Generate a short unique calculation ID."""
    return uuid.uuid4().hex[:12]


def get_calc_id() -> str:
    return _calc_id_var.get()


def get_snapshot_id() -> str:
    return _snapshot_id_var.get()


def get_source() -> str:
    return _source_var.get()


def get_context_dict() -> dict[str, Any]:
    """All bound context values, for merging into a log entry."""
    ctx = {}
    calc_id = get_calc_id()
    if calc_id:
        ctx["calc_id"] = calc_id
    snapshot_id = get_snapshot_id()
    if snapshot_id:
        ctx["snapshot_id"] = snapshot_id
    source = get_source()
    if source:
        ctx["source"] = source
    extra = _extra_context_var.get()
    if extra:
        ctx.update(extra)
    return ctx


@dataclass
class CalculationContext:
    """Context manager binding calculation identifiers to log entries.

    Values set by an enclosing context are restored on exit, so contexts
    nest.

    Example:
        with CalculationContext(source="alert", snapshot_id=snap.snapshot_id):
            logger.info("recalculating")  # includes calc_id, snapshot_id, source
    """

    calc_id: str = ""
    snapshot_id: str = ""
    source: str = ""
    extra: dict[str, Any] = field(default_factory=dict)
    started_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    _tokens: list = field(default_factory=list, repr=False)

    def __post_init__(self):
        if not self.calc_id:
            self.calc_id = generate_calc_id()

    def __enter__(self) -> "CalculationContext":
        self._tokens = [
            (_calc_id_var, _calc_id_var.set(self.calc_id)),
            (_snapshot_id_var, _snapshot_id_var.set(self.snapshot_id)),
            (_source_var, _source_var.set(self.source)),
            (_extra_context_var, _extra_context_var.set(self.extra.copy())),
        ]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since the context was created."""
        delta = datetime.now(timezone.utc) - self.started_at
        return delta.total_seconds() * 1000

    def bind(self, **kwargs: Any) -> None:
        """Add extra key-value pairs to the active context."""
        current = _extra_context_var.get()
        _extra_context_var.set({**current, **kwargs})
        self.extra.update(kwargs)
