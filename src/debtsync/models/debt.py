"""Debt position inputs and derived calculation results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[str, date, datetime]


@dataclass(frozen=True, slots=True)
class DebtConfiguration:
    """Read-only debt parameters supplied by the portfolio layer."""

    current_balance: float  # Outstanding balance when the debt was entered
    apr: float  # Annual percentage rate, e.g. 19.9 for 19.9%
    monthly_repayment: float
    repayment_day_of_month: int  # 1..31, clamped to short months
    entered_at: DateLike
    loan_start_date: Optional[DateLike] = None
    loan_end_date: Optional[DateLike] = None
    total_term_months: Optional[int] = None
    paid_off: bool = False
    archived: bool = False

    @property
    def has_loan_term_data(self) -> bool:
        """True when both loan term dates are present."""

        return bool(self.loan_start_date) and bool(self.loan_end_date)

    @property
    def is_paid_off(self) -> bool:
        return self.paid_off is True

    @property
    def is_archived(self) -> bool:
        return self.archived is True


@dataclass(slots=True)
class MonthlyUpdateResult:
    """Outcome of accruing one month of interest and applying one repayment."""

    new_balance: float
    interest_charged: float
    principal_paid: float
    is_paid_off: bool


@dataclass(slots=True)
class RepaymentStep:
    """A single month in a projected repayment schedule."""

    month: int  # 1-based
    balance: float
    interest: float
    principal: float
    cumulative_interest: float
    cumulative_principal: float


@dataclass(slots=True)
class LoanProgress:
    """Progress through a loan with known start and end dates."""

    total_months: int
    months_elapsed: int
    months_remaining: int
    progress_percent: float
    is_term_complete: bool


@dataclass(slots=True)
class DebtBalanceResult:
    """Balance and accrual totals after replaying every due repayment."""

    current_balance: float
    total_interest_accrued: float
    total_principal_repaid: float
    repayments_applied: int
    is_paid_off: bool
    months_to_payoff: Optional[int] = None
    loan_progress: Optional[LoanProgress] = None


@dataclass(slots=True)
class DebtSummary:
    """Display-ready snapshot of a debt position."""

    balance: float
    monthly_repayment: float
    apr: float
    paid_off_percent: float
    total_repaid: float
    months_to_payoff: Optional[int]
    estimated_payoff_date: Optional[str]  # ISO date
    is_paid_off: bool
    loan_progress: Optional[LoanProgress] = None


__all__ = [
    "DateLike",
    "DebtBalanceResult",
    "DebtConfiguration",
    "DebtSummary",
    "LoanProgress",
    "MonthlyUpdateResult",
    "RepaymentStep",
]
