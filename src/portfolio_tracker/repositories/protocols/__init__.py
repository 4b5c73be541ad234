"""Repository protocol definitions (interfaces)."""

from portfolio_tracker.repositories.protocols.remote_store import RemoteStore
from portfolio_tracker.repositories.protocols.snapshot_store import SnapshotStore

__all__ = [
    "RemoteStore",
    "SnapshotStore",
]
