"""SQLAlchemy repository implementations."""

from portfolio_tracker.repositories.sqlalchemy.database import (
    build_engine,
    build_session_factory,
    init_store_schema,
    init_cache_schema,
    StoreBase,
    CacheBase,
)
from portfolio_tracker.repositories.sqlalchemy.remote_store import SqlAlchemyRemoteStore
from portfolio_tracker.repositories.sqlalchemy.snapshot_store import SqlAlchemySnapshotStore

__all__ = [
    "build_engine",
    "build_session_factory",
    "init_store_schema",
    "init_cache_schema",
    "StoreBase",
    "CacheBase",
    "SqlAlchemyRemoteStore",
    "SqlAlchemySnapshotStore",
]
