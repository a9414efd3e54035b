"""Data types and SQLModel table exports."""

from .debt import (
    DebtBalanceResult,
    DebtConfiguration,
    DebtSummary,
    LoanProgress,
    MonthlyUpdateResult,
    RepaymentStep,
)
from .repayment_log import RepaymentLog, RepaymentLogEntry, SyncResult
from .storage import StorageRecord

__all__ = [
    "DebtBalanceResult",
    "DebtConfiguration",
    "DebtSummary",
    "LoanProgress",
    "MonthlyUpdateResult",
    "RepaymentLog",
    "RepaymentLogEntry",
    "RepaymentStep",
    "StorageRecord",
    "SyncResult",
]
