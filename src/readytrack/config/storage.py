"""Data storage configuration helpers.

Each deployment stage keeps its own database below the shared data directory:
``<data_dir>/<environment>/db/readytrack.db``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Final

from .env import optional_env_var
from .errors import UnknownEnvironmentError

APP_DIR_NAME: Final[str] = "readytrack"
DEFAULT_DB_FILENAME: Final[str] = "readytrack.db"
ENVIRONMENT_ENV: Final[str] = "READYTRACK_ENVIRONMENT"
DATA_DIR_ENV: Final[str] = "READYTRACK_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"


class Environment(StrEnum):
    DEVELOPMENT = "development"
    TEST = "test"
    ACCEPTANCE = "acceptance"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: str) -> Environment:
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            raise UnknownEnvironmentError(value) from exc


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    environment: Environment = Environment.DEVELOPMENT
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def environment_dir(self) -> Path:
        return self.resolve_data_dir() / self.environment.value / "db"

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.environment_dir()
        if ensure:
            base.mkdir(parents=True, exist_ok=True)
        return base / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"

    def for_environment(self, environment: Environment) -> StorageConfig:
        return StorageConfig(
            data_dir=self.data_dir,
            environment=environment,
            database_filename=self.database_filename,
        )


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    environment: Environment = field(default=Environment.DEVELOPMENT)


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_environment() -> Environment:
    raw = optional_env_var(ENVIRONMENT_ENV)
    return Environment.parse(raw) if raw else Environment.DEVELOPMENT


def get_storage_config(*, environment: Environment | None = None) -> StorageConfig:
    env_dir = optional_env_var(DATA_DIR_ENV)
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir, environment=environment or get_environment())


def get_database_config(
    *,
    storage: StorageConfig | None = None,
    environment: Environment | None = None,
) -> DatabaseConfig:
    """Resolve the database URI; ``DATABASE_URI`` wins over the per-environment path."""

    storage_config = storage or get_storage_config(environment=environment)
    if environment is not None and storage_config.environment is not environment:
        storage_config = storage_config.for_environment(environment)
    env_uri = optional_env_var(DATABASE_URI_ENV)
    if env_uri:
        return DatabaseConfig(uri=env_uri, environment=storage_config.environment)
    return DatabaseConfig(
        uri=storage_config.database_uri(),
        environment=storage_config.environment,
    )
