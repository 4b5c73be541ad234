"""Snapshot store protocol (local, best-effort persistence)."""

from typing import Protocol, Optional


class SnapshotStore(Protocol):
    """Interface for the per-owner snapshot blob and last-active-account record."""

    def read_snapshot(self, owner_id: str) -> Optional[str]:
        """Return the raw serialized snapshot for an owner, if any."""
        ...

    def write_snapshot(self, owner_id: str, payload: str) -> None:
        """Insert or replace the serialized snapshot for an owner."""
        ...

    def delete_snapshot(self, owner_id: str) -> None:
        """Remove the owner's cached snapshot."""
        ...

    def read_active_account(self, owner_id: str) -> Optional[str]:
        """Return the owner's last active account id, if remembered."""
        ...

    def write_active_account(self, owner_id: str, account_id: str) -> None:
        """Remember the owner's active account id."""
        ...
