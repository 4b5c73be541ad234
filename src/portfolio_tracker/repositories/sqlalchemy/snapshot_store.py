"""SQLAlchemy implementation of SnapshotStore."""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import sessionmaker

from portfolio_tracker.repositories.sqlalchemy.orm_models import SnapshotCacheORM, ActiveAccountORM


class SqlAlchemySnapshotStore:
    """SQLAlchemy-backed local cache for serialized snapshots."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def read_snapshot(self, owner_id: str) -> Optional[str]:
        """Return the raw serialized snapshot for an owner, if any."""
        with self._session_factory() as db:
            row = db.get(SnapshotCacheORM, owner_id)
            return row.payload if row else None

    def write_snapshot(self, owner_id: str, payload: str) -> None:
        """Insert or replace the serialized snapshot for an owner."""
        with self._session_factory() as db:
            row = db.get(SnapshotCacheORM, owner_id)
            if row:
                row.payload = payload
                row.updated_at = datetime.utcnow()
            else:
                db.add(
                    SnapshotCacheORM(
                        owner_id=owner_id,
                        payload=payload,
                        updated_at=datetime.utcnow(),
                    )
                )
            db.commit()

    def delete_snapshot(self, owner_id: str) -> None:
        """Remove the owner's cached snapshot."""
        with self._session_factory() as db:
            db.query(SnapshotCacheORM).filter(
                SnapshotCacheORM.owner_id == owner_id
            ).delete()
            db.commit()

    def read_active_account(self, owner_id: str) -> Optional[str]:
        """Return the owner's last active account id, if remembered."""
        with self._session_factory() as db:
            row = db.get(ActiveAccountORM, owner_id)
            return row.account_id if row else None

    def write_active_account(self, owner_id: str, account_id: str) -> None:
        """Remember the owner's active account id."""
        with self._session_factory() as db:
            row = db.get(ActiveAccountORM, owner_id)
            if row:
                row.account_id = account_id
                row.updated_at = datetime.utcnow()
            else:
                db.add(
                    ActiveAccountORM(
                        owner_id=owner_id,
                        account_id=account_id,
                        updated_at=datetime.utcnow(),
                    )
                )
            db.commit()
