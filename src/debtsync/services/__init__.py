"""Service module exports."""

from . import amortization, balances, calendar_math, loan_progress, repayment_log, sync

__all__ = [
    "amortization",
    "balances",
    "calendar_math",
    "loan_progress",
    "repayment_log",
    "sync",
]
