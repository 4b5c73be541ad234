"""Repository layer - data access abstractions and implementations."""

from portfolio_tracker.repositories.protocols import RemoteStore, SnapshotStore

__all__ = [
    "RemoteStore",
    "SnapshotStore",
]
