"""Application configuration helpers."""

from __future__ import annotations

from .env import int_env_var, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError, UnknownEnvironmentError
from .logging import configure_logging, resolve_log_level
from .query import DISPLAY_DATE_FORMAT, MAX_QUERY_RESULTS, QueryConfig, get_query_config
from .storage import (
    DatabaseConfig,
    Environment,
    StorageConfig,
    get_database_config,
    get_environment,
    get_storage_config,
)

__all__ = [
    "DISPLAY_DATE_FORMAT",
    "MAX_QUERY_RESULTS",
    "ConfigurationError",
    "DatabaseConfig",
    "Environment",
    "MissingConfigurationError",
    "QueryConfig",
    "StorageConfig",
    "UnknownEnvironmentError",
    "configure_logging",
    "get_database_config",
    "get_environment",
    "get_query_config",
    "get_storage_config",
    "int_env_var",
    "optional_env_var",
    "require_env_vars",
    "resolve_log_level",
]
