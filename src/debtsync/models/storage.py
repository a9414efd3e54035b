"""Namespaced key/value documents stored in the database."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


class StorageRecord(SQLModel, table=True):
    """One serialized document kept under a unique storage key."""

    __tablename__: ClassVar[str] = "storage_record"

    key: str = Field(primary_key=True, max_length=128)
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, nullable=False)
