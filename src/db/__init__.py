"""Database package for journal persistence."""

from src.db.base import Base
from src.db.engine import get_sync_engine, get_sync_session_factory, SyncSessionLocal
from src.db.models import SnapshotRecord

__all__ = [
    "Base",
    "get_sync_engine",
    "get_sync_session_factory",
    "SyncSessionLocal",
    "SnapshotRecord",
]
