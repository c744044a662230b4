"""Database engine and session factory for the journal store."""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.db.base import Base
from src.settings import get_settings

_sync_engine = None


def _build_engine(url: str) -> Engine:
    if url.startswith("sqlite") and ":memory:" in url:
        # One shared connection, otherwise every session sees an empty database
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, pool_pre_ping=True)


def get_sync_engine(url: Optional[str] = None) -> Engine:
    """Get or create the database engine.

    Args:
        url: Database URL. Defaults to settings.journal_database_url; an
            explicit URL always builds a fresh engine.
    """
    global _sync_engine
    if url is not None:
        return _build_engine(url)
    if _sync_engine is None:
        _sync_engine = _build_engine(get_settings().journal_database_url)
    return _sync_engine


def get_sync_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    """Session factory bound to the engine, creating tables on first use."""
    engine = engine or get_sync_engine()
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)


# Convenience alias
SyncSessionLocal = get_sync_session_factory
