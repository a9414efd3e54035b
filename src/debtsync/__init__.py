"""Debt amortization and repayment-synchronization engine."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, TestConfig
from .context import AppContext, create_app_context
from .models import DebtConfiguration, SyncResult
from .services.repayment_log import RepaymentLogStore
from .services.sync import SyncEngine

__all__ = [
    "AppContext",
    "BaseConfig",
    "DebtConfiguration",
    "DevConfig",
    "RepaymentLogStore",
    "SyncEngine",
    "SyncResult",
    "TestConfig",
    "create_app_context",
]
