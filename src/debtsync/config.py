"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Interpret environment variable values as integers, falling back on junk."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "debtsync"
    DB_FILENAME = "debtsync.db"
    DEFAULT_REPAYMENT_LOG_KEY = "debt-repayments"
    DEFAULT_MAX_PROJECTION_MONTHS = 600

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DEBTSYNC_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("DEBTSYNC_DATABASE_URL", self._build_sqlite_url())
        self.REPAYMENT_LOG_KEY = os.getenv(
            "DEBTSYNC_REPAYMENT_LOG_KEY", self.DEFAULT_REPAYMENT_LOG_KEY
        )
        self.MAX_PROJECTION_MONTHS = _env_int(
            "DEBTSYNC_MAX_PROJECTION_MONTHS", self.DEFAULT_MAX_PROJECTION_MONTHS
        )
        if self.MAX_PROJECTION_MONTHS <= 0:
            raise ValueError("DEBTSYNC_MAX_PROJECTION_MONTHS must be positive.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("DEBTSYNC_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        return {"connect_args": connect_args}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Test configuration backed by an in-memory SQLite database."""

    __test__ = False  # keep pytest from collecting this class

    DEBUG = False
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        from sqlalchemy.pool import StaticPool

        options = super().sqlalchemy_engine_options()
        # One shared connection so every session sees the same in-memory schema.
        options["poolclass"] = StaticPool
        return options
