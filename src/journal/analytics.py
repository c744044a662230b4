"""Trade Journal Analytics.

Summary statistics over saved snapshots:
- Counts overall and by status
- Planned risk and capital exposure
- Planned R-multiple and stop-distance averages
- Per-ticker breakdown
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from src.journal.models import ROW_COLUMNS, Snapshot, SnapshotStatus
from src.logging_config.performance import PerformanceTimer
from src.position_calculator.normalize import normalize_ticker

logger = logging.getLogger(__name__)


@dataclass
class JournalSummary:
    """Aggregate figures for a set of snapshots."""

    total_trades: int = 0
    counts_by_status: dict[str, int] = field(default_factory=dict)
    total_planned_risk: float = 0.0
    total_exposure: float = 0.0
    total_potential_profit: float = 0.0
    avg_r_multiple: Optional[float] = None
    best_r_multiple: Optional[float] = None
    avg_stop_distance_pct: Optional[float] = None


def _mean_or_none(series: pd.Series) -> Optional[float]:
    values = series.dropna()
    return float(np.mean(values)) if len(values) else None


def _max_or_none(series: pd.Series) -> Optional[float]:
    values = series.dropna()
    return float(np.max(values)) if len(values) else None


class JournalAnalytics:
    """Analytics over journal snapshots.

    Example:
        analytics = JournalAnalytics()
        summary = analytics.summarize(store.list())
        print(summary.total_planned_risk, summary.avg_r_multiple)
    """

    def to_frame(self, snapshots: Sequence[Snapshot]) -> pd.DataFrame:
        """One row per snapshot, columns in journal row order.

        Missing derived values become NaN.
        """
        if not snapshots:
            return pd.DataFrame(columns=list(ROW_COLUMNS))
        df = pd.DataFrame([s.to_row() for s in snapshots], columns=list(ROW_COLUMNS))
        numeric = [c for c in ROW_COLUMNS if c not in ("timestamp", "ticker", "notes", "status")]
        df[numeric] = df[numeric].apply(pd.to_numeric, errors="coerce")
        return df

    def filter(
        self,
        snapshots: Sequence[Snapshot],
        ticker: Optional[str] = None,
        status: Optional[SnapshotStatus] = None,
    ) -> list[Snapshot]:
        """Snapshots whose ticker contains ``ticker`` and whose status matches."""
        symbol = normalize_ticker(ticker) if ticker else ""
        wanted = SnapshotStatus(status) if status is not None else None
        return [
            s for s in snapshots
            if (not symbol or symbol in s.ticker)
            and (wanted is None or s.status == wanted)
        ]

    def summarize(self, snapshots: Sequence[Snapshot]) -> JournalSummary:
        """Aggregate counts, risk, exposure and R statistics.

        Args:
            snapshots: Snapshots to summarize.

        Returns:
            JournalSummary; averages are None when no snapshot defines them.
        """
        with PerformanceTimer("journal_summary"):
            df = self.to_frame(snapshots)
            if df.empty:
                return JournalSummary(
                    counts_by_status={s.value: 0 for s in SnapshotStatus},
                )

            counts = df["status"].value_counts()
            return JournalSummary(
                total_trades=len(df),
                counts_by_status={s.value: int(counts.get(s.value, 0)) for s in SnapshotStatus},
                total_planned_risk=float(df["risk_dollars"].fillna(0).sum()),
                total_exposure=float(df["position_size"].fillna(0).sum()),
                total_potential_profit=float(df["total_profit"].fillna(0).sum()),
                avg_r_multiple=_mean_or_none(df["r_multiple"]),
                best_r_multiple=_max_or_none(df["r_multiple"]),
                avg_stop_distance_pct=_mean_or_none(df["stop_distance_pct"]),
            )

    def breakdown_by_ticker(self, snapshots: Sequence[Snapshot]) -> pd.DataFrame:
        """Trades, planned risk and exposure per ticker, largest exposure first."""
        df = self.to_frame(snapshots)
        if df.empty:
            return pd.DataFrame(columns=["ticker", "trades", "planned_risk", "exposure"])

        grouped = df.groupby("ticker", as_index=False).agg(
            trades=("timestamp", "size"),
            planned_risk=("risk_dollars", "sum"),
            exposure=("position_size", "sum"),
        )
        return grouped.sort_values("exposure", ascending=False).reset_index(drop=True)
