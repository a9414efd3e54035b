"""Persisted repayment-log records and sync results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(slots=True)
class RepaymentLogEntry:
    """Synchronization state for one debt position."""

    position_id: str
    applied_count: int
    cached_balance: float  # Balance after every applied repayment
    cumulative_interest: float = 0.0
    cumulative_principal: float = 0.0
    last_synced_at: str = ""  # ISO 8601, set by the sync caller

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the stored camelCase keys."""

        return {
            "positionId": self.position_id,
            "appliedCount": self.applied_count,
            "lastSyncedAt": self.last_synced_at,
            "cachedBalance": self.cached_balance,
            "cumulativeInterest": self.cumulative_interest,
            "cumulativePrincipal": self.cumulative_principal,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, default_synced_at: str = "") -> "RepaymentLogEntry":
        """Build an entry from an already validated stored mapping."""

        last_synced = data.get("lastSyncedAt")
        return cls(
            position_id=data["positionId"],
            applied_count=int(data["appliedCount"]),
            cached_balance=float(data["cachedBalance"]),
            cumulative_interest=float(data.get("cumulativeInterest") or 0.0),
            cumulative_principal=float(data.get("cumulativePrincipal") or 0.0),
            last_synced_at=last_synced if isinstance(last_synced, str) else default_synced_at,
        )


@dataclass(slots=True)
class RepaymentLog:
    """All tracked positions plus the time of the last write."""

    entries: list[RepaymentLogEntry] = field(default_factory=list)
    updated_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def find(self, position_id: str) -> Optional[RepaymentLogEntry]:
        for entry in self.entries:
            if entry.position_id == position_id:
                return entry
        return None

    def upsert(self, entry: RepaymentLogEntry) -> None:
        """Replace the entry for the same position or append a new one."""

        for index, existing in enumerate(self.entries):
            if existing.position_id == entry.position_id:
                self.entries[index] = entry
                return
        self.entries.append(entry)

    def discard(self, position_id: str) -> bool:
        """Drop the entry for ``position_id``; return True when one was removed."""

        before = len(self.entries)
        self.entries = [e for e in self.entries if e.position_id != position_id]
        return len(self.entries) < before

    def retain(self, active_ids: set[str]) -> int:
        """Keep only entries whose position is active; return how many were dropped."""

        before = len(self.entries)
        self.entries = [e for e in self.entries if e.position_id in active_ids]
        return before - len(self.entries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "updatedAt": self.updated_at,
        }


@dataclass(slots=True)
class SyncResult:
    """Outcome of reconciling one position against the repayment log."""

    position_id: str
    current_balance: float
    new_repayments_applied: int
    total_repayments_applied: int
    cumulative_interest: float
    cumulative_principal: float
    is_paid_off: bool


__all__ = ["RepaymentLog", "RepaymentLogEntry", "SyncResult"]
