"""Pytest configuration and shared fixtures for debtsync tests.

Provides an isolated SQLite database per test, an in-memory storage fake,
a fixed clock and a factory for debt configurations, so services can be
exercised without touching a real application database.
"""

from __future__ import annotations

import tempfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from debtsync.infra.repositories import InMemoryStorageRepository, SQLModelStorageRepository
from debtsync.models import DebtConfiguration, StorageRecord  # noqa: F401
from debtsync.services.repayment_log import RepaymentLogStore
from debtsync.services.sync import SyncEngine

FIXED_NOW = datetime(2025, 3, 1, 9, 30)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the repositories' ``Callable[[], Session]`` contract."""

    @contextmanager
    def factory():
        session = Session(db_engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


@pytest.fixture
def sql_storage(session_factory) -> SQLModelStorageRepository:
    return SQLModelStorageRepository(session_factory)


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def memory_storage() -> InMemoryStorageRepository:
    return InMemoryStorageRepository()


@pytest.fixture
def clock():
    """Deterministic clock returning FIXED_NOW."""

    return lambda: FIXED_NOW


@pytest.fixture
def log_store(memory_storage, clock) -> RepaymentLogStore:
    return RepaymentLogStore(memory_storage, clock=clock)


@pytest.fixture
def engine(log_store, clock) -> SyncEngine:
    return SyncEngine(log_store, clock=clock)


@pytest.fixture
def debt_factory():
    """Factory for debt configurations with sensible defaults.

    Defaults describe a 5,000 balance at 12% APR (1% a month) repaid at 500
    on the 15th, entered on 2025-01-01.
    """

    def _create_debt(
        current_balance: float = 5000.0,
        apr: float = 12.0,
        monthly_repayment: float = 500.0,
        repayment_day_of_month: int = 15,
        entered_at: str = "2025-01-01T00:00:00Z",
        **kwargs,
    ) -> DebtConfiguration:
        return DebtConfiguration(
            current_balance=current_balance,
            apr=apr,
            monthly_repayment=monthly_repayment,
            repayment_day_of_month=repayment_day_of_month,
            entered_at=entered_at,
            **kwargs,
        )

    return _create_debt


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance (default one cent)."""
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
