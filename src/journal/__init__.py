"""Trade Journal Module.

Provides:
- Snapshot: saved calculation with editable raw fields and derived metrics
- SnapshotRecalculator: the only writer of a snapshot's derived fields
- InMemorySnapshotStore / SqlSnapshotStore: reference persistence
- JournalAnalytics: summary statistics over snapshots
"""

from src.journal.models import (
    EDITABLE_FIELDS,
    ROW_COLUMNS,
    Snapshot,
    SnapshotEditError,
    SnapshotNotFoundError,
    SnapshotStatus,
)
from src.journal.recalculator import SnapshotRecalculator, create_snapshot, recalculate_snapshot
from src.journal.store import InMemorySnapshotStore, SqlSnapshotStore
from src.journal.analytics import JournalAnalytics, JournalSummary

__all__ = [
    "EDITABLE_FIELDS",
    "ROW_COLUMNS",
    "Snapshot",
    "SnapshotEditError",
    "SnapshotNotFoundError",
    "SnapshotStatus",
    "SnapshotRecalculator",
    "create_snapshot",
    "recalculate_snapshot",
    "InMemorySnapshotStore",
    "SqlSnapshotStore",
    "JournalAnalytics",
    "JournalSummary",
]
