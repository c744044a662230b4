"""Snapshot Recalculator.

The only writer of a snapshot's derived fields. Creating a snapshot from
a sizing outcome and editing its raw fields both go through
``derive_metrics``, the same function live sizing uses, so a stored
record always agrees with what the calculator would show for it.
"""

import dataclasses
import logging
import math
from typing import Any, Optional

from src.journal.models import EDITABLE_FIELDS, Snapshot, SnapshotEditError, SnapshotStatus
from src.position_calculator.config import DEFAULT_SIZING_CONFIG, SizingConfig
from src.position_calculator.metrics import derive_metrics
from src.position_calculator.models import SizingOutcome
from src.position_calculator.normalize import as_amount, normalize_number, normalize_ticker

logger = logging.getLogger(__name__)


def _edit_amount(value: Any) -> float:
    """Edited numeric field as a float; typed text goes through the normalizer."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return as_amount(float(value))
    return as_amount(normalize_number(value))


class SnapshotRecalculator:
    """Creates snapshots and re-derives them after edits.

    Example:
        recalculator = SnapshotRecalculator()
        snap = recalculator.create(outcome, ticker="$aapl", notes="breakout")
        snap = recalculator.recalculate(snap, stop=94.0, shares=15)
    """

    def __init__(self, config: Optional[SizingConfig] = None) -> None:
        self.config = config or DEFAULT_SIZING_CONFIG

    def create(self, outcome: SizingOutcome, ticker: str = "", notes: str = "") -> Snapshot:
        """Snapshot a successful sizing outcome.

        Raises:
            ValueError: If the outcome is not OK; only sized trades are saved.
        """
        if not outcome.is_ok:
            raise ValueError(f"Cannot snapshot a {outcome.status.value} calculation")

        inputs = outcome.inputs
        snapshot = Snapshot(
            ticker=normalize_ticker(ticker),
            account_size=inputs.account_size,
            risk_pct=inputs.risk_pct,
            max_account_pct=inputs.max_account_pct,
            entry=inputs.entry_price,
            stop=inputs.stop_price,
            target=inputs.target_price if inputs.has_target else None,
            shares=outcome.result.shares,
            notes=notes,
        )
        return self._derive(snapshot)

    def recalculate(self, snapshot: Snapshot, **edits: Any) -> Snapshot:
        """Apply raw-field edits and re-derive every metric.

        Args:
            snapshot: Stored snapshot.
            **edits: New values for any of ticker, entry, stop, shares,
                notes, status. Prices and shares may be typed text
                ("2.5k", "1,200"); unparseable text counts as zero and
                fractional shares are floored.

        Returns:
            A new Snapshot; the input is never mutated.

        Raises:
            SnapshotEditError: If an edit names a derived or fixed field.
        """
        rejected = sorted(set(edits) - EDITABLE_FIELDS)
        if rejected:
            raise SnapshotEditError(f"Fields are not editable: {', '.join(rejected)}")

        changes: dict[str, Any] = {}
        if "ticker" in edits:
            changes["ticker"] = normalize_ticker(edits["ticker"])
        if "entry" in edits:
            changes["entry"] = _edit_amount(edits["entry"])
        if "stop" in edits:
            changes["stop"] = _edit_amount(edits["stop"])
        if "shares" in edits:
            changes["shares"] = max(0, math.floor(_edit_amount(edits["shares"])))
        if "notes" in edits:
            changes["notes"] = edits["notes"] or ""
        if "status" in edits:
            changes["status"] = SnapshotStatus(edits["status"])

        updated = self._derive(dataclasses.replace(snapshot, **changes))
        if edits:
            logger.debug("Recalculated snapshot %s after editing %s", snapshot.snapshot_id, ", ".join(sorted(edits)))
        return updated

    def _derive(self, snapshot: Snapshot) -> Snapshot:
        metrics = derive_metrics(
            entry_price=snapshot.entry,
            stop_price=snapshot.stop,
            shares=snapshot.shares,
            account_size=snapshot.account_size,
            target_price=snapshot.target,
            config=self.config,
        )
        return dataclasses.replace(snapshot, metrics=metrics)


def create_snapshot(outcome: SizingOutcome, ticker: str = "", notes: str = "") -> Snapshot:
    """Snapshot a sizing outcome with the default config."""
    return SnapshotRecalculator().create(outcome, ticker=ticker, notes=notes)


def recalculate_snapshot(snapshot: Snapshot, **edits: Any) -> Snapshot:
    """Edit and re-derive a snapshot with the default config."""
    return SnapshotRecalculator().recalculate(snapshot, **edits)
