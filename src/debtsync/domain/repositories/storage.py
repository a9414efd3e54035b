"""Key/value storage protocol."""

from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Persists serialized documents under namespaced string keys."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Create or overwrite the value stored under ``key``."""
        ...

    def delete(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""
        ...
