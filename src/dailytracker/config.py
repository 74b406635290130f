"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, raising on garbage."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DailyTracker"
    DB_FILENAME = "dailytracker.db"
    DEFAULT_STREAK_WALK_LIMIT = 366

    def __init__(self) -> None:
        self.DEV_MODE = _env_bool("DAILYTRACKER_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("DAILYTRACKER_DATABASE_URL", self._build_sqlite_url())
        self.WEEK_STARTS_ON = _env_int("DAILYTRACKER_WEEK_STARTS_ON", 0)
        self.STREAK_WALK_LIMIT = _env_int(
            "DAILYTRACKER_STREAK_WALK_LIMIT", self.DEFAULT_STREAK_WALK_LIMIT
        )
        if not 0 <= self.WEEK_STARTS_ON <= 6:
            raise ConfigurationError("DAILYTRACKER_WEEK_STARTS_ON must be between 0 and 6.")
        if self.STREAK_WALK_LIMIT <= 0:
            raise ConfigurationError("DAILYTRACKER_STREAK_WALK_LIMIT must be positive.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("DAILYTRACKER_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration for the test-suite: in-memory SQLite, no dev console noise."""

    __test__ = False  # keep pytest from collecting this class

    DEBUG = False
    TESTING = True

    def __init__(self, data_dir: Path | None = None) -> None:
        self._data_dir = data_dir
        super().__init__()
        self.DEV_MODE = False
        self.DATABASE_URL = "sqlite://"

    def _resolve_data_dir(self) -> Path:
        if self._data_dir is None:
            return super()._resolve_data_dir()
        path = Path(self._data_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        from sqlalchemy.pool import StaticPool

        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
