"""Local read-through cache of an owner's portfolio snapshot."""

import json
import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from portfolio_tracker.backup.formats import (
    SnapshotDocument,
    dump_record,
    snapshot_from_document,
    snapshot_to_document,
)
from portfolio_tracker.core.exceptions import CacheInvalidError, ValidationError
from portfolio_tracker.domain.models import PortfolioSnapshot
from portfolio_tracker.repositories.protocols import SnapshotStore

logger = logging.getLogger(__name__)


class SnapshotCache:
    """
    Best-effort mirror of the remote state, keyed by owner.

    Never authoritative: a cached snapshot is only used after it passes schema
    validation, and an invalid one is discarded rather than repaired. Write
    failures are logged and do not interrupt the caller.
    """

    def __init__(self, store: SnapshotStore):
        self._store = store

    def load(self, owner_id: str) -> Optional[PortfolioSnapshot]:
        """
        Return the owner's cached snapshot, or None if nothing is cached.

        Raises CacheInvalidError if the cached record is malformed.
        """
        try:
            raw = self._store.read_snapshot(owner_id)
        except SQLAlchemyError as e:
            raise CacheInvalidError(f"Snapshot cache unreadable: {e}") from e
        if raw is None:
            return None
        return self.parse(raw)

    @staticmethod
    def parse(raw: str) -> PortfolioSnapshot:
        """Validate a serialized snapshot: accounts list, transactions map, active id."""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CacheInvalidError(f"Cached snapshot is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CacheInvalidError("Cached snapshot is not an object")

        try:
            document = SnapshotDocument.model_validate(data)
        except PydanticValidationError as e:
            raise CacheInvalidError(f"Cached snapshot failed validation: {e}") from e
        if not document.active_account_id:
            raise CacheInvalidError("Cached snapshot has no active account")

        snapshot = snapshot_from_document(document)
        try:
            snapshot.validate()
        except ValidationError as e:
            raise CacheInvalidError(f"Cached snapshot is inconsistent: {e.message}") from e
        return snapshot

    def save(self, owner_id: str, snapshot: PortfolioSnapshot) -> None:
        """Write the snapshot and the remembered active account through to the cache."""
        payload = json.dumps(dump_record(snapshot_to_document(snapshot)))
        try:
            self._store.write_snapshot(owner_id, payload)
            if snapshot.active_account_id:
                self._store.write_active_account(owner_id, snapshot.active_account_id)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to write snapshot cache for owner {owner_id}: {e}")

    def discard(self, owner_id: str) -> None:
        try:
            self._store.delete_snapshot(owner_id)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to discard snapshot cache for owner {owner_id}: {e}")

    def last_active_account_id(self, owner_id: str) -> Optional[str]:
        try:
            return self._store.read_active_account(owner_id)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to read active account for owner {owner_id}: {e}")
            return None
