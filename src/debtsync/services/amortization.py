"""Amortization formulas and month-by-month balance projection.

Key formulas:

* Fixed payment for an amortized loan::

    M = P * r * (1 + r)**n / ((1 + r)**n - 1)

  with ``r = APR / 12 / 100`` and ``n`` the number of monthly payments.

* Monthly balance update (credit card or general debt)::

    new_balance = balance * (1 + APR / 12 / 100) - repayment

Every function here is pure. Out-of-range inputs produce neutral results
(zero payments, empty schedules) instead of exceptions; validating user input
is the caller's job.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from ..models.debt import MonthlyUpdateResult, RepaymentStep

# Balances at or below this are treated as repaid (rounding residue).
PAYOFF_THRESHOLD = 0.01
# 50 years of monthly steps.
DEFAULT_MAX_MONTHS = 600


def monthly_rate(apr: float) -> float:
    """Convert an annual percentage rate into a monthly fraction."""

    return apr / 12 / 100


def calculate_amortized_payment(principal: float, annual_rate: float, total_months: int) -> float:
    """Return the fixed monthly payment that clears ``principal`` in ``total_months``.

    Interest-free loans (``annual_rate <= 0``) fall back to simple division.

    >>> round(calculate_amortized_payment(10000, 5.5, 60), 2)
    190.99
    >>> round(calculate_amortized_payment(5000, 0, 24), 2)
    208.33
    """

    if total_months <= 0 or principal <= 0:
        return 0.0

    if annual_rate <= 0:
        return principal / total_months

    r = monthly_rate(annual_rate)
    factor = (1 + r) ** total_months
    return principal * r * factor / (factor - 1)


def apply_monthly_update(balance: float, apr: float, monthly_repayment: float) -> MonthlyUpdateResult:
    """Accrue one month of interest on ``balance`` and deduct one repayment.

    A repayment that covers the balance plus interest clears the debt: the
    new balance is exactly zero and the whole remaining balance counts as
    principal. A repayment smaller than the interest yields zero principal
    and a growing balance.
    """

    if balance <= 0:
        return MonthlyUpdateResult(
            new_balance=0.0, interest_charged=0.0, principal_paid=0.0, is_paid_off=True
        )

    interest_charged = balance * monthly_rate(apr)
    balance_with_interest = balance + interest_charged

    if monthly_repayment >= balance_with_interest:
        return MonthlyUpdateResult(
            new_balance=0.0,
            interest_charged=interest_charged,
            principal_paid=balance,
            is_paid_off=True,
        )

    new_balance = balance_with_interest - monthly_repayment
    return MonthlyUpdateResult(
        new_balance=max(0.0, new_balance),
        interest_charged=interest_charged,
        principal_paid=max(0.0, monthly_repayment - interest_charged),
        is_paid_off=new_balance <= PAYOFF_THRESHOLD,
    )


def project_repayment_schedule(
    balance: float,
    apr: float,
    monthly_repayment: float,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> Iterator[RepaymentStep]:
    """Yield one step per month until the debt clears or ``max_months`` is hit.

    The schedule is a generator: it can only be consumed once. When the
    repayment never outpaces interest the schedule simply stops at
    ``max_months`` without a paid-off step.
    """

    if balance <= 0 or monthly_repayment <= 0:
        return

    current = balance
    cumulative_interest = 0.0
    cumulative_principal = 0.0

    for month in range(1, max_months + 1):
        result = apply_monthly_update(current, apr, monthly_repayment)
        cumulative_interest += result.interest_charged
        cumulative_principal += result.principal_paid

        yield RepaymentStep(
            month=month,
            balance=result.new_balance,
            interest=result.interest_charged,
            principal=result.principal_paid,
            cumulative_interest=cumulative_interest,
            cumulative_principal=cumulative_principal,
        )

        current = result.new_balance
        if result.is_paid_off:
            break


def schedule_totals(steps: Iterable[RepaymentStep]) -> tuple[int, float, float]:
    """Return (months, total_interest, total_principal) for a schedule."""

    months = 0
    last: RepaymentStep | None = None
    for step in steps:
        months += 1
        last = step
    if last is None:
        return 0, 0.0, 0.0
    return months, last.cumulative_interest, last.cumulative_principal


__all__ = [
    "DEFAULT_MAX_MONTHS",
    "PAYOFF_THRESHOLD",
    "apply_monthly_update",
    "calculate_amortized_payment",
    "monthly_rate",
    "project_repayment_schedule",
    "schedule_totals",
]
