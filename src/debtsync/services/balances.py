"""Current balance and display summary for a debt position.

``calculate_current_debt_balance`` is the stateless entry point: it replays
every repayment from the originally entered balance and persists nothing.
The cached, incremental variant lives in :mod:`debtsync.services.sync`.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..models.debt import DateLike, DebtBalanceResult, DebtConfiguration, DebtSummary, LoanProgress
from .amortization import (
    DEFAULT_MAX_MONTHS,
    PAYOFF_THRESHOLD,
    apply_monthly_update,
    project_repayment_schedule,
)
from .calendar_math import add_months, count_repayments_due, to_date
from .loan_progress import calculate_loan_progress

logger = logging.getLogger("debtsync.balances")


def apply_repayments(
    balance: float, apr: float, monthly_repayment: float, count: int
) -> tuple[float, float, float]:
    """Apply up to ``count`` monthly updates, stopping as soon as the debt clears.

    Returns (balance, interest_charged, principal_paid) accumulated over the
    updates that were applied.
    """

    total_interest = 0.0
    total_principal = 0.0
    for _ in range(count):
        result = apply_monthly_update(balance, apr, monthly_repayment)
        total_interest += result.interest_charged
        total_principal += result.principal_paid
        balance = result.new_balance
        if result.is_paid_off:
            break
    return balance, total_interest, total_principal


def months_to_payoff(
    balance: float, apr: float, monthly_repayment: float, max_months: int = DEFAULT_MAX_MONTHS
) -> Optional[int]:
    """Number of months left until payoff.

    None when the debt is already cleared, there is no repayment, or the
    repayment never clears the balance within ``max_months``.
    """

    if balance <= PAYOFF_THRESHOLD or monthly_repayment <= 0:
        return None
    months = 0
    cleared = False
    for step in project_repayment_schedule(balance, apr, monthly_repayment, max_months):
        months = step.month
        cleared = step.balance <= PAYOFF_THRESHOLD
    return months if cleared else None


def _loan_progress_for(config: DebtConfiguration, now: date) -> Optional[LoanProgress]:
    if config.has_loan_term_data:
        return calculate_loan_progress(config.loan_start_date, config.loan_end_date, now)
    # A start date plus a term length is enough to place the end date.
    if config.loan_start_date and config.total_term_months:
        end_date = add_months(config.loan_start_date, config.total_term_months)
        return calculate_loan_progress(config.loan_start_date, end_date, now)
    return None


def calculate_current_debt_balance(
    config: DebtConfiguration,
    applied_count: int = 0,
    now: DateLike | None = None,
    *,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> DebtBalanceResult:
    """Replay every due repayment from the entered balance.

    Args:
        config: The debt configuration
        applied_count: Repayments already applied and persisted elsewhere
        now: Override the current date (for testing)
        max_months: Cap for the months-to-payoff projection

    Returns:
        Current balance, accrual totals, months to payoff and loan progress
    """
    today = to_date(now) if now is not None else date.today()

    total_due = count_repayments_due(config.entered_at, config.repayment_day_of_month, today)
    new_repayments = max(0, total_due - applied_count)

    # Rebuild the already-applied trajectory, then catch up on anything new.
    balance, replay_interest, replay_principal = apply_repayments(
        config.current_balance, config.apr, config.monthly_repayment, applied_count
    )
    balance, new_interest, new_principal = apply_repayments(
        balance, config.apr, config.monthly_repayment, new_repayments
    )

    is_paid_off = balance <= PAYOFF_THRESHOLD
    payoff_months = None
    if not is_paid_off:
        payoff_months = months_to_payoff(balance, config.apr, config.monthly_repayment, max_months)

    logger.debug(
        "Resolved balance from entry",
        extra={
            "repayments_due": total_due,
            "new_repayments": new_repayments,
            "balance": balance,
        },
    )

    return DebtBalanceResult(
        current_balance=max(0.0, balance),
        total_interest_accrued=replay_interest + new_interest,
        total_principal_repaid=replay_principal + new_principal,
        repayments_applied=applied_count + new_repayments,
        is_paid_off=is_paid_off,
        months_to_payoff=payoff_months,
        loan_progress=_loan_progress_for(config, today),
    )


def build_debt_summary(
    config: DebtConfiguration,
    applied_count: int = 0,
    now: DateLike | None = None,
    *,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> DebtSummary:
    """Build the display summary for a debt position."""

    today = to_date(now) if now is not None else date.today()
    result = calculate_current_debt_balance(config, applied_count, today, max_months=max_months)

    original_balance = config.current_balance
    total_repaid = result.total_principal_repaid
    if original_balance > 0:
        paid_off_percent = min(100.0, total_repaid / original_balance * 100)
    else:
        paid_off_percent = 0.0

    estimated_payoff_date = None
    if result.months_to_payoff is not None:
        estimated_payoff_date = add_months(today, result.months_to_payoff).isoformat()

    return DebtSummary(
        balance=result.current_balance,
        monthly_repayment=config.monthly_repayment,
        apr=config.apr,
        paid_off_percent=paid_off_percent,
        total_repaid=total_repaid,
        months_to_payoff=result.months_to_payoff,
        estimated_payoff_date=estimated_payoff_date,
        is_paid_off=result.is_paid_off,
        loan_progress=result.loan_progress,
    )


__all__ = [
    "apply_repayments",
    "build_debt_summary",
    "calculate_current_debt_balance",
    "months_to_payoff",
]
