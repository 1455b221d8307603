"""Where the contact store lives and how its engine is built.

Without ``DATABASE_URI`` the store is a SQLite file under the data directory.
SQLite serialises writers, so concurrent merges wait on the file lock for up to
``CONTACTLINK_DB_BUSY_TIMEOUT`` seconds instead of failing straight away.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "contactlink"
DEFAULT_DB_FILENAME: Final[str] = "contactlink.db"
DEFAULT_BUSY_TIMEOUT: Final[float] = 30.0

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def sqlite_path(self, *, create: bool = True) -> Path:
        data_dir = self.data_dir.expanduser().resolve()
        if create:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.database_filename

    def sqlite_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.sqlite_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False
    busy_timeout: float = DEFAULT_BUSY_TIMEOUT

    @property
    def is_sqlite(self) -> bool:
        return self.uri.startswith("sqlite")

    def engine_options(self) -> dict[str, Any]:
        """Keyword arguments for ``sqlalchemy.create_engine``."""

        options: dict[str, Any] = {"future": True, "echo": self.echo}
        if self.is_sqlite:
            options["connect_args"] = {"timeout": self.busy_timeout}
        else:
            options["pool_pre_ping"] = True
        return options


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in _TRUE_VALUES


def _env_seconds(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}") from exc
    if value < 0:
        raise ConfigurationError(f"{name} cannot be negative")
    return value


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("CONTACTLINK_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """Read ``DATABASE_URI`` (or fall back to the SQLite file) plus engine tuning flags."""

    uri = os.getenv("DATABASE_URI") or (storage or get_storage_config()).sqlite_uri()
    return DatabaseConfig(
        uri=uri,
        echo=_env_flag("CONTACTLINK_DB_ECHO"),
        busy_timeout=_env_seconds("CONTACTLINK_DB_BUSY_TIMEOUT", DEFAULT_BUSY_TIMEOUT),
    )
