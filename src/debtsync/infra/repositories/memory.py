"""Dict-backed storage for tests and embedding without a database."""

from __future__ import annotations

from typing import Optional


class InMemoryStorageRepository:
    """Keeps values in a plain dict; counts writes so callers can assert on them."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self.write_count += 1

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


__all__ = ["InMemoryStorageRepository"]
