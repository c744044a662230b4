"""SQLAlchemy ORM models for the trade journal.

Tables:
- calculation_snapshots: Saved position-size calculations with their
  derived metrics, one row per snapshot
"""

from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from src.db.base import Base


class SnapshotRecord(Base):
    """Saved calculation snapshot.

    Derived columns are written from the recalculated metrics on every
    save so the table can be queried or exported directly.
    """

    __tablename__ = "calculation_snapshots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    snapshot_id = Column(String(32), unique=True, nullable=False, index=True)
    ticker = Column(String(20), nullable=False, default="", index=True)
    status = Column(String(20), nullable=False, default="open", index=True)

    # Calculator state at save time
    account_size = Column(Float, nullable=False)
    risk_pct = Column(Float, nullable=False)
    max_account_pct = Column(Float, nullable=False)
    target = Column(Float)

    # Editable raw fields
    entry = Column(Float, nullable=False)
    stop = Column(Float, nullable=False)
    shares = Column(Integer, nullable=False)
    notes = Column(Text, nullable=False, default="")

    # Derived (written by the recalculator only)
    position_size = Column(Float)
    risk_dollars = Column(Float)
    stop_distance_pct = Column(Float)
    r_multiple = Column(Float)
    target_5r = Column(Float)
    roi_pct = Column(Float)
    percent_of_account = Column(Float)
    profit_per_share = Column(Float)
    total_profit = Column(Float)
    risk_reward = Column(Float)

    # Metadata
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<SnapshotRecord {self.snapshot_id} {self.ticker} x{self.shares}>"
