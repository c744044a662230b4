"""Trade Journal Data Models.

A snapshot is a saved calculation plus user notes. Its raw fields
(ticker, entry, stop, shares, notes, status) are editable; everything in
``metrics`` is derived and may only be rewritten by the recalculator.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from src.position_calculator.models import DerivedMetrics


class SnapshotStatus(str, Enum):
    """Lifecycle label of a saved trade plan."""
    OPEN = "open"
    TRIMMED = "trimmed"
    CLOSED = "closed"


# Raw fields a caller may edit; every other field is fixed or derived
EDITABLE_FIELDS: frozenset[str] = frozenset({"ticker", "entry", "stop", "shares", "notes", "status"})

# Column order of the flat journal row
ROW_COLUMNS: tuple[str, ...] = (
    "timestamp",
    "ticker",
    "entry",
    "stop",
    "risk_pct",
    "account_size",
    "max_account_pct",
    "target",
    "shares",
    "position_size",
    "risk_dollars",
    "stop_distance_pct",
    "r_multiple",
    "target_5R",
    "roi_pct",
    "percent_of_account",
    "profit_per_share",
    "total_profit",
    "risk_reward",
    "notes",
    "status",
)


class SnapshotEditError(ValueError):
    """Raised when an edit targets a field the caller may not write."""


class SnapshotNotFoundError(KeyError):
    """Raised when a store has no snapshot with the requested ID."""


def _new_snapshot_id() -> str:
    return uuid.uuid4().hex[:16]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Snapshot:
    """Saved calculation: inputs at save time, editable raw fields, derived metrics.

    ``account_size``, ``risk_pct``, ``max_account_pct`` and ``target``
    record the calculator state when the snapshot was taken and are not
    editable afterwards.
    """
    ticker: str = ""
    account_size: float = 0.0
    risk_pct: float = 0.0
    max_account_pct: float = 100.0
    entry: float = 0.0
    stop: float = 0.0
    target: Optional[float] = None
    shares: int = 0
    notes: str = ""
    status: SnapshotStatus = SnapshotStatus.OPEN
    metrics: DerivedMetrics = field(default_factory=DerivedMetrics)
    snapshot_id: str = field(default_factory=_new_snapshot_id)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: Optional[datetime] = None

    def to_row(self) -> dict[str, Any]:
        """Flat, export-friendly record keyed by ``ROW_COLUMNS``."""
        m = self.metrics
        return {
            "timestamp": self.created_at.isoformat(),
            "ticker": self.ticker,
            "entry": self.entry,
            "stop": self.stop,
            "risk_pct": self.risk_pct,
            "account_size": self.account_size,
            "max_account_pct": self.max_account_pct,
            "target": self.target,
            "shares": self.shares,
            "position_size": m.position_size,
            "risk_dollars": m.total_risk,
            "stop_distance_pct": m.stop_distance_pct,
            "r_multiple": m.r_multiple,
            "target_5R": m.five_r_target,
            "roi_pct": m.roi_pct,
            "percent_of_account": m.percent_of_account,
            "profit_per_share": m.profit_per_share,
            "total_profit": m.total_profit,
            "risk_reward": m.risk_reward_ratio,
            "notes": self.notes,
            "status": self.status.value,
        }
