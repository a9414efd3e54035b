"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from sqlmodel import Session

from .config import BaseConfig
from .infra.database import create_db_engine, create_session_factory, init_database
from .infra.repositories import SQLModelStorageRepository
from .models.debt import DateLike, DebtConfiguration, DebtSummary
from .services.balances import build_debt_summary
from .services.repayment_log import RepaymentLogStore
from .services.sync import SyncEngine


@dataclass
class AppContext:
    """Wired-up storage, repayment log and sync engine."""

    config: BaseConfig
    session_factory: Callable[[], Session]
    storage_repo: SQLModelStorageRepository
    repayment_log: RepaymentLogStore
    sync_engine: SyncEngine

    def debt_summary(
        self, position_id: str, config: DebtConfiguration, now: DateLike | None = None
    ) -> DebtSummary:
        """Summarize a position using the repayment count recorded in the log."""

        applied = self.repayment_log.applied_count(position_id)
        return build_debt_summary(
            config, applied, now, max_months=self.config.MAX_PROJECTION_MONTHS
        )


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the engine, make sure the schema exists and wire the services."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    storage_repo = SQLModelStorageRepository(session_factory)
    repayment_log = RepaymentLogStore(storage_repo, key=config.REPAYMENT_LOG_KEY)
    sync_engine = SyncEngine(repayment_log)

    return AppContext(
        config=config,
        session_factory=session_factory,
        storage_repo=storage_repo,
        repayment_log=repayment_log,
        sync_engine=sync_engine,
    )
