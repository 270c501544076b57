"""Location of the local library database."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "kioku"
DEFAULT_DB_FILENAME: Final[str] = "kioku.db"
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def default_data_dir() -> Path:
    """``$XDG_DATA_HOME/kioku`` (``%LOCALAPPDATA%\\kioku`` on Windows)."""

    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(base) / APP_DIR_NAME


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def database_path(self) -> Path:
        """Path of the SQLite file; creates the data directory on first use."""

        data_dir = self.data_dir.expanduser().resolve()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("KIOKU_DATA_DIR")
    return StorageConfig(data_dir=Path(env_dir) if env_dir else default_data_dir())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins over the data directory; ``KIOKU_SQL_ECHO`` logs statements."""

    echo = os.getenv("KIOKU_SQL_ECHO", "").strip().lower() in _TRUTHY
    uri = os.getenv("DATABASE_URI") or (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri, echo=echo)
