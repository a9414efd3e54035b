"""SQLModel implementation of the key/value storage protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.storage import StorageRecord


class SQLModelStorageRepository:
    """Stores each key as one row of the ``storage_record`` table."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        with self.session_factory() as session:
            record = session.exec(select(StorageRecord).where(StorageRecord.key == key)).first()
            return record.value if record else None

    def set(self, key: str, value: str) -> None:
        with self.session_factory() as session:
            record = session.exec(select(StorageRecord).where(StorageRecord.key == key)).first()
            if record:
                record.value = value
                record.updated_at = datetime.now()
            else:
                record = StorageRecord(key=key, value=value)
            session.add(record)
            session.commit()

    def delete(self, key: str) -> None:
        with self.session_factory() as session:
            record = session.exec(select(StorageRecord).where(StorageRecord.key == key)).first()
            if record:
                session.delete(record)
                session.commit()

    def keys(self) -> list[str]:
        """List every stored key."""
        with self.session_factory() as session:
            return list(session.exec(select(StorageRecord.key).order_by(StorageRecord.key)).all())


__all__ = ["SQLModelStorageRepository"]
