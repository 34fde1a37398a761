from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from readytrack.config import (
    ConfigurationError,
    DatabaseConfig,
    Environment,
    MissingConfigurationError,
    QueryConfig,
    StorageConfig,
    UnknownEnvironmentError,
    get_database_config,
    get_environment,
    get_query_config,
    get_storage_config,
    int_env_var,
    require_env_vars,
    resolve_log_level,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_require_env_vars_reports_all_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("READYTRACK_ONE", "1")
    monkeypatch.setenv("READYTRACK_BLANK", "   ")
    monkeypatch.delenv("READYTRACK_ABSENT", raising=False)

    with pytest.raises(MissingConfigurationError) as excinfo:
        require_env_vars(["READYTRACK_ONE", "READYTRACK_BLANK", "READYTRACK_ABSENT"])

    assert "READYTRACK_ABSENT, READYTRACK_BLANK" in str(excinfo.value)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("READYTRACK_ONE", "1")

    assert require_env_vars(["READYTRACK_ONE"]) == {"READYTRACK_ONE": "1"}


def test_int_env_var(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("READYTRACK_NUMBER", raising=False)
    assert int_env_var("READYTRACK_NUMBER", default=7) == 7

    monkeypatch.setenv("READYTRACK_NUMBER", "abc")
    with pytest.raises(ConfigurationError, match="must be an integer"):
        int_env_var("READYTRACK_NUMBER", default=7)


def test_each_environment_gets_its_own_database(tmp_path: Path) -> None:
    storage = StorageConfig(data_dir=tmp_path, environment=Environment.ACCEPTANCE)

    path = storage.database_path()

    assert path == tmp_path.resolve() / "acceptance" / "db" / "readytrack.db"
    assert path.parent.is_dir()
    assert storage.database_uri() == f"sqlite+pysqlite:///{path}"
    production = storage.for_environment(Environment.PRODUCTION)
    assert production.database_path(ensure=False).parent.parent.name == "production"


def test_environment_parse() -> None:
    assert Environment.parse(" Test ") is Environment.TEST
    with pytest.raises(UnknownEnvironmentError):
        Environment.parse("staging")


def test_environment_defaults_to_development(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("READYTRACK_ENVIRONMENT", raising=False)
    assert get_environment() is Environment.DEVELOPMENT

    monkeypatch.setenv("READYTRACK_ENVIRONMENT", "production")
    assert get_environment() is Environment.PRODUCTION


def test_database_config_uses_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("READYTRACK_DATA_DIR", str(tmp_path))

    config = get_database_config(environment=Environment.TEST)

    assert config.environment is Environment.TEST
    assert config.uri.endswith("/test/db/readytrack.db")
    assert get_storage_config().data_dir == tmp_path


def test_database_uri_env_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    config = get_database_config(environment=Environment.ACCEPTANCE)

    assert config == DatabaseConfig(
        uri="sqlite+pysqlite:///:memory:",
        environment=Environment.ACCEPTANCE,
    )


@pytest.mark.parametrize("limit", [0, -1, 1001])
def test_query_config_bounds(limit: int) -> None:
    with pytest.raises(ConfigurationError):
        QueryConfig(max_results=limit)


def test_query_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("READYTRACK_QUERY_LIMIT", "25")
    assert get_query_config().max_results == 25

    monkeypatch.delenv("READYTRACK_QUERY_LIMIT")
    assert get_query_config() == QueryConfig()


def test_resolve_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("READYTRACK_LOG_LEVEL", raising=False)
    assert resolve_log_level() == logging.INFO
    assert resolve_log_level("debug") == logging.DEBUG

    monkeypatch.setenv("READYTRACK_LOG_LEVEL", "warning")
    assert resolve_log_level() == logging.WARNING

    with pytest.raises(ConfigurationError, match="Unknown log level"):
        resolve_log_level("chatty")
