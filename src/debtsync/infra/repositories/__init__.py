"""Concrete storage implementations."""

from .memory import InMemoryStorageRepository
from .storage import SQLModelStorageRepository

__all__ = ["InMemoryStorageRepository", "SQLModelStorageRepository"]
