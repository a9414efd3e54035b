"""Idempotent catch-up of scheduled repayments against the repayment log.

Each position moves from "never synced" (no log entry) to a synced state
holding the number of repayments applied and the balance they produced. A
sync recounts the repayments due from the immutable entry date, applies only
the ones beyond the logged count, and continues from the *cached* balance
rather than replaying history from the original principal (see
:func:`debtsync.services.balances.calculate_current_debt_balance` for that
stateless variant).

Repeating a sync with the same ``now`` finds nothing new and skips the write,
so it is safe to run on every portfolio refresh. There is no locking: the
owning layer should run one sync pass at a time.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable, Iterable, Optional

from ..models.debt import DateLike, DebtConfiguration
from ..models.repayment_log import RepaymentLogEntry, SyncResult
from .amortization import PAYOFF_THRESHOLD
from .balances import apply_repayments
from .calendar_math import count_repayments_due
from .repayment_log import RepaymentLogStore

logger = logging.getLogger("debtsync.sync")


class SyncEngine:
    """Applies newly due repayments and persists the result."""

    def __init__(self, store: RepaymentLogStore, clock: Callable[[], datetime] | None = None):
        self.store = store
        self.clock = clock or datetime.now

    def _resolve_now(self, now: DateLike | None) -> datetime:
        if now is None:
            return self.clock()
        if isinstance(now, datetime):
            return now
        if isinstance(now, date):
            return datetime.combine(now, time())
        return datetime.fromisoformat(now.strip())

    def _catch_up(
        self,
        position_id: str,
        config: DebtConfiguration,
        existing: Optional[RepaymentLogEntry],
        now: datetime,
    ) -> tuple[RepaymentLogEntry, SyncResult]:
        """Apply every repayment due beyond the logged count, starting from the cache."""

        applied_count = existing.applied_count if existing else 0
        total_due = count_repayments_due(config.entered_at, config.repayment_day_of_month, now)
        new_repayments = max(0, total_due - applied_count)

        start_balance = existing.cached_balance if existing else config.current_balance
        balance, interest, principal = apply_repayments(
            start_balance, config.apr, config.monthly_repayment, new_repayments
        )
        cumulative_interest = (existing.cumulative_interest if existing else 0.0) + interest
        cumulative_principal = (existing.cumulative_principal if existing else 0.0) + principal
        total_applied = applied_count + new_repayments
        balance = max(0.0, balance)

        if new_repayments:
            logger.debug(
                f"Applied {new_repayments} repayment(s) to position {position_id}",
                extra={"position_id": position_id, "balance": balance, "total_applied": total_applied},
            )

        entry = RepaymentLogEntry(
            position_id=position_id,
            applied_count=total_applied,
            cached_balance=balance,
            cumulative_interest=cumulative_interest,
            cumulative_principal=cumulative_principal,
            last_synced_at=now.isoformat(),
        )
        result = SyncResult(
            position_id=position_id,
            current_balance=balance,
            new_repayments_applied=new_repayments,
            total_repayments_applied=total_applied,
            cumulative_interest=cumulative_interest,
            cumulative_principal=cumulative_principal,
            is_paid_off=balance <= PAYOFF_THRESHOLD,
        )
        return entry, result

    def sync_one(
        self, position_id: str, config: DebtConfiguration, now: DateLike | None = None
    ) -> SyncResult:
        """Sync a single position, writing the log only when something changed.

        Args:
            position_id: Stable identifier of the debt position
            config: The position's debt configuration
            now: Override the current time (for testing)

        Returns:
            Balance after the catch-up and the number of repayments it applied
        """
        current = self._resolve_now(now)
        log = self.store.load()
        existing = log.find(position_id)

        entry, result = self._catch_up(position_id, config, existing, current)

        if result.new_repayments_applied > 0 or existing is None:
            log.upsert(entry)
            self.store.save(log)

        return result

    def sync_many(
        self,
        positions: Iterable[tuple[str, DebtConfiguration]],
        now: DateLike | None = None,
    ) -> dict[str, SyncResult]:
        """Sync several positions with one load and at most one save.

        Archived and paid-off positions are skipped and absent from the result.
        """

        pending = list(positions)
        if not pending:
            return {}

        current = self._resolve_now(now)
        log = self.store.load()
        results: dict[str, SyncResult] = {}
        changed = False

        for position_id, config in pending:
            if config.is_archived or config.is_paid_off:
                continue

            existing = log.find(position_id)
            entry, result = self._catch_up(position_id, config, existing, current)
            if result.new_repayments_applied > 0 or existing is None:
                log.upsert(entry)
                changed = True
            results[position_id] = result

        if changed:
            self.store.save(log)

        logger.info(
            "Repayment sync pass complete",
            extra={"positions": len(results), "log_written": changed},
        )
        return results

    def reset_cached_balance(self, position_id: str, new_balance: float) -> None:
        """Replace the cached balance after a manual correction.

        ``applied_count`` and the cumulative totals are kept, so repayments
        that already elapsed are not applied again to the corrected figure.
        Does nothing for a position that has never been synced.
        """

        log = self.store.load()
        existing = log.find(position_id)
        if existing is None:
            return

        existing.cached_balance = max(0.0, new_balance)
        existing.last_synced_at = self.clock().isoformat()
        self.store.save(log)
        logger.info(f"Cached balance reset for position {position_id}")


__all__ = ["SyncEngine"]
