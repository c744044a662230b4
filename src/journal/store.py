"""Snapshot Stores.

Reference persistence collaborators for saved calculations. Both stores
expose the same create/get/update/delete/list/clear surface and route
every edit through the SnapshotRecalculator, so no stored record can
carry a derived value that disagrees with its raw fields.

The in-memory store suits tests and embedding callers; the SQL store
backs the CLI journal and persists to any SQLAlchemy database.
"""

import dataclasses
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from src.db.models import SnapshotRecord
from src.journal.models import Snapshot, SnapshotNotFoundError, SnapshotStatus
from src.journal.recalculator import SnapshotRecalculator
from src.logging_config.context import CalculationContext
from src.position_calculator.models import SizingOutcome
from src.position_calculator.normalize import normalize_ticker

logger = logging.getLogger(__name__)


def _matches(snapshot: Snapshot, ticker: Optional[str], status: Optional[SnapshotStatus]) -> bool:
    if ticker and normalize_ticker(ticker) not in snapshot.ticker:
        return False
    if status is not None and snapshot.status != SnapshotStatus(status):
        return False
    return True


class InMemorySnapshotStore:
    """Thread-safe in-memory snapshot store.

    Example:
        store = InMemorySnapshotStore()
        snap = store.create(outcome, ticker="AAPL")
        store.update(snap.snapshot_id, stop=94.5)
        open_trades = store.list(status=SnapshotStatus.OPEN)
    """

    def __init__(self, recalculator: Optional[SnapshotRecalculator] = None) -> None:
        self.recalculator = recalculator or SnapshotRecalculator()
        self._lock = threading.RLock()
        self._snapshots: dict[str, Snapshot] = {}

    def create(self, outcome: SizingOutcome, ticker: str = "", notes: str = "") -> Snapshot:
        """Snapshot a sizing outcome and store it."""
        return self.add(self.recalculator.create(outcome, ticker=ticker, notes=notes))

    def add(self, snapshot: Snapshot) -> Snapshot:
        """Store an existing snapshot, re-deriving its metrics first."""
        snapshot = self.recalculator.recalculate(snapshot)
        with self._lock:
            self._snapshots[snapshot.snapshot_id] = snapshot
        with CalculationContext(snapshot_id=snapshot.snapshot_id, source="journal"):
            logger.info("Saved snapshot for %s (%d shares)", snapshot.ticker or "?", snapshot.shares)
        return snapshot

    def get(self, snapshot_id: str) -> Optional[Snapshot]:
        """Get a snapshot by ID."""
        with self._lock:
            return self._snapshots.get(snapshot_id)

    def update(self, snapshot_id: str, **edits: Any) -> Snapshot:
        """Edit raw fields of a stored snapshot and re-derive its metrics.

        Raises:
            SnapshotNotFoundError: If the ID is unknown.
            SnapshotEditError: If an edit names a derived or fixed field.
        """
        with self._lock:
            current = self._snapshots.get(snapshot_id)
            if current is None:
                raise SnapshotNotFoundError(snapshot_id)
            updated = self.recalculator.recalculate(current, **edits)
            updated = dataclasses.replace(updated, updated_at=datetime.now(timezone.utc))
            self._snapshots[snapshot_id] = updated
        with CalculationContext(snapshot_id=snapshot_id, source="journal"):
            logger.info("Updated snapshot fields: %s", ", ".join(sorted(edits)) or "none")
        return updated

    def delete(self, snapshot_id: str) -> None:
        """Remove a snapshot.

        Raises:
            SnapshotNotFoundError: If the ID is unknown.
        """
        with self._lock:
            if snapshot_id not in self._snapshots:
                raise SnapshotNotFoundError(snapshot_id)
            del self._snapshots[snapshot_id]
        logger.info("Deleted snapshot %s", snapshot_id)

    def list(
        self,
        ticker: Optional[str] = None,
        status: Optional[SnapshotStatus] = None,
    ) -> list[Snapshot]:
        """Snapshots newest first, optionally filtered by ticker substring and status."""
        with self._lock:
            records = list(self._snapshots.values())
        records = [s for s in reversed(records) if _matches(s, ticker, status)]
        records.sort(key=lambda s: s.created_at, reverse=True)
        return records

    def clear(self) -> int:
        """Remove every snapshot. Returns the number removed."""
        with self._lock:
            count = len(self._snapshots)
            self._snapshots.clear()
        logger.info("Cleared %d snapshots", count)
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshots)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlSnapshotStore:
    """SQLAlchemy-backed snapshot store.

    Args:
        session: Open SQLAlchemy session. Tables must already exist
            (see ``src.db.engine.get_sync_session_factory``).
        recalculator: Recalculator used for every write.
    """

    def __init__(self, session: Session, recalculator: Optional[SnapshotRecalculator] = None) -> None:
        self.session = session
        self.recalculator = recalculator or SnapshotRecalculator()

    # =========================================================================
    # Row mapping
    # =========================================================================

    @staticmethod
    def _write_row(record: SnapshotRecord, snapshot: Snapshot) -> None:
        m = snapshot.metrics
        record.snapshot_id = snapshot.snapshot_id
        record.ticker = snapshot.ticker
        record.status = snapshot.status.value
        record.account_size = snapshot.account_size
        record.risk_pct = snapshot.risk_pct
        record.max_account_pct = snapshot.max_account_pct
        record.target = snapshot.target
        record.entry = snapshot.entry
        record.stop = snapshot.stop
        record.shares = snapshot.shares
        record.notes = snapshot.notes
        record.position_size = m.position_size
        record.risk_dollars = m.total_risk
        record.stop_distance_pct = m.stop_distance_pct
        record.r_multiple = m.r_multiple
        record.target_5r = m.five_r_target
        record.roi_pct = m.roi_pct
        record.percent_of_account = m.percent_of_account
        record.profit_per_share = m.profit_per_share
        record.total_profit = m.total_profit
        record.risk_reward = m.risk_reward_ratio
        record.created_at = snapshot.created_at
        record.updated_at = snapshot.updated_at

    def _to_snapshot(self, record: SnapshotRecord) -> Snapshot:
        snapshot = Snapshot(
            snapshot_id=record.snapshot_id,
            ticker=record.ticker or "",
            status=SnapshotStatus(record.status),
            account_size=record.account_size,
            risk_pct=record.risk_pct,
            max_account_pct=record.max_account_pct,
            target=record.target,
            entry=record.entry,
            stop=record.stop,
            shares=record.shares,
            notes=record.notes or "",
            created_at=_as_utc(record.created_at),
            updated_at=_as_utc(record.updated_at),
        )
        # Metrics are re-derived from the raw columns, never trusted from the row
        return self.recalculator.recalculate(snapshot)

    def _find(self, snapshot_id: str) -> Optional[SnapshotRecord]:
        return self.session.query(SnapshotRecord).filter(
            SnapshotRecord.snapshot_id == snapshot_id
        ).first()

    # =========================================================================
    # CRUD
    # =========================================================================

    def create(self, outcome: SizingOutcome, ticker: str = "", notes: str = "") -> Snapshot:
        """Snapshot a sizing outcome and persist it."""
        return self.add(self.recalculator.create(outcome, ticker=ticker, notes=notes))

    def add(self, snapshot: Snapshot) -> Snapshot:
        """Persist an existing snapshot, re-deriving its metrics first."""
        snapshot = self.recalculator.recalculate(snapshot)
        record = SnapshotRecord()
        self._write_row(record, snapshot)
        self.session.add(record)
        self.session.commit()
        with CalculationContext(snapshot_id=snapshot.snapshot_id, source="journal"):
            logger.info("Saved snapshot for %s (%d shares)", snapshot.ticker or "?", snapshot.shares)
        return snapshot

    def get(self, snapshot_id: str) -> Optional[Snapshot]:
        """Get a snapshot by ID."""
        record = self._find(snapshot_id)
        return self._to_snapshot(record) if record else None

    def update(self, snapshot_id: str, **edits: Any) -> Snapshot:
        """Edit raw fields of a stored snapshot and re-derive its metrics.

        Raises:
            SnapshotNotFoundError: If the ID is unknown.
            SnapshotEditError: If an edit names a derived or fixed field.
        """
        record = self._find(snapshot_id)
        if record is None:
            raise SnapshotNotFoundError(snapshot_id)

        updated = self.recalculator.recalculate(self._to_snapshot(record), **edits)
        updated = dataclasses.replace(updated, updated_at=datetime.now(timezone.utc))
        self._write_row(record, updated)
        self.session.commit()
        with CalculationContext(snapshot_id=snapshot_id, source="journal"):
            logger.info("Updated snapshot fields: %s", ", ".join(sorted(edits)) or "none")
        return updated

    def delete(self, snapshot_id: str) -> None:
        """Remove a snapshot.

        Raises:
            SnapshotNotFoundError: If the ID is unknown.
        """
        record = self._find(snapshot_id)
        if record is None:
            raise SnapshotNotFoundError(snapshot_id)
        self.session.delete(record)
        self.session.commit()
        logger.info("Deleted snapshot %s", snapshot_id)

    def list(
        self,
        ticker: Optional[str] = None,
        status: Optional[SnapshotStatus] = None,
    ) -> list[Snapshot]:
        """Snapshots newest first, optionally filtered by ticker substring and status."""
        query = self.session.query(SnapshotRecord)
        if ticker:
            query = query.filter(SnapshotRecord.ticker.contains(normalize_ticker(ticker)))
        if status is not None:
            query = query.filter(SnapshotRecord.status == SnapshotStatus(status).value)
        records = query.order_by(SnapshotRecord.created_at.desc(), SnapshotRecord.id.desc()).all()
        return [self._to_snapshot(r) for r in records]

    def clear(self) -> int:
        """Remove every snapshot. Returns the number removed."""
        count = self.session.query(SnapshotRecord).delete()
        self.session.commit()
        logger.info("Cleared %d snapshots", count)
        return count

    def __len__(self) -> int:
        return self.session.query(SnapshotRecord).count()
