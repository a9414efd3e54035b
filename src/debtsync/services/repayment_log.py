"""Persistent log of auto-applied monthly repayments.

The log is a single JSON document stored under its own key (by default
``debt-repayments``), separate from any portfolio data. It holds one entry per
debt position with the count of repayments applied so far and the balance
those repayments produced, so a sync only has to apply what is newly due.

A missing or malformed document is treated as "never synced": loading logs a
warning and returns an empty log. Failures raised by the storage backend
itself are not caught.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from ..domain.repositories.storage import KeyValueStore
from ..models.repayment_log import RepaymentLog, RepaymentLogEntry

logger = logging.getLogger("debtsync.repayment_log")

DEFAULT_LOG_KEY = "debt-repayments"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def is_valid_log(data: Any) -> bool:
    """Basic shape validation for a decoded repayment log document."""

    if not isinstance(data, dict):
        return False
    entries = data.get("entries")
    if not isinstance(entries, list):
        return False
    if not isinstance(data.get("updatedAt"), str):
        return False

    for entry in entries:
        if not isinstance(entry, dict):
            return False
        if not isinstance(entry.get("positionId"), str):
            return False
        applied = entry.get("appliedCount")
        if not _is_number(applied) or applied < 0:
            return False
        if not _is_number(entry.get("cachedBalance")):
            return False
        for optional in ("cumulativeInterest", "cumulativePrincipal"):
            if optional in entry and entry[optional] is not None and not _is_number(entry[optional]):
                return False

    return True


class RepaymentLogStore:
    """Loads and saves the repayment log through a key/value backend."""

    def __init__(
        self,
        storage: KeyValueStore,
        key: str = DEFAULT_LOG_KEY,
        clock: Callable[[], datetime] | None = None,
    ):
        self.storage = storage
        self.key = key
        self.clock = clock or datetime.now

    def _empty(self) -> RepaymentLog:
        return RepaymentLog(entries=[], updated_at=self.clock().isoformat())

    def load(self) -> RepaymentLog:
        """Return the persisted log, or an empty one if nothing usable is stored."""

        raw = self.storage.get(self.key)
        if not raw:
            return self._empty()

        try:
            parsed = json.loads(raw)
        except ValueError as exc:
            logger.warning(f"Repayment log under '{self.key}' is not valid JSON: {exc}")
            return self._empty()

        if not is_valid_log(parsed):
            logger.warning(f"Repayment log under '{self.key}' has invalid shape, returning empty log")
            return self._empty()

        updated_at = parsed["updatedAt"]
        entries: list[RepaymentLogEntry] = []
        seen: set[str] = set()
        for item in parsed["entries"]:
            entry = RepaymentLogEntry.from_dict(item, default_synced_at=updated_at)
            # Position ids are unique; the first occurrence wins.
            if entry.position_id in seen:
                continue
            seen.add(entry.position_id)
            entries.append(entry)
        return RepaymentLog(entries=entries, updated_at=updated_at)

    def save(self, log: RepaymentLog) -> None:
        """Persist ``log``, stamping its last-write time."""

        log.updated_at = self.clock().isoformat()
        self.storage.set(self.key, json.dumps(log.to_dict()))
        logger.info(
            "Repayment log saved",
            extra={"entries": len(log.entries), "storage_key": self.key},
        )

    def entry(self, position_id: str) -> Optional[RepaymentLogEntry]:
        """Read-only lookup; None when the position has never been synced."""

        return self.load().find(position_id)

    def applied_count(self, position_id: str) -> int:
        """Number of repayments applied for a position, 0 when untracked."""

        found = self.entry(position_id)
        return found.applied_count if found else 0

    def remove(self, position_id: str) -> None:
        """Delete the entry for a deleted debt position."""

        log = self.load()
        if log.discard(position_id):
            self.save(log)

    def prune(self, active_ids: Iterable[str]) -> None:
        """Drop entries for positions that are no longer in the portfolio."""

        log = self.load()
        dropped = log.retain(set(active_ids))
        if dropped:
            logger.info(f"Pruned {dropped} orphaned repayment log entries")
            self.save(log)

    def clear(self) -> None:
        """Delete the whole log. Destructive: all tracking state is lost."""

        self.storage.delete(self.key)
        logger.warning(f"Repayment log '{self.key}' cleared")


__all__ = ["DEFAULT_LOG_KEY", "RepaymentLogStore", "is_valid_log"]
