"""Shared logging helpers for readytrack."""

from __future__ import annotations

import logging

from .env import optional_env_var
from .errors import ConfigurationError

LOG_LEVEL_ENV = "READYTRACK_LOG_LEVEL"


def resolve_log_level(name: str | None = None) -> int:
    """Translate a level name (``debug``, ``INFO``...) into a logging constant."""

    raw = name or optional_env_var(LOG_LEVEL_ENV)
    if raw is None:
        return logging.INFO
    level = logging.getLevelNamesMapping().get(raw.strip().upper())
    if level is None:
        raise ConfigurationError(f"Unknown log level: {raw!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with a terse format suitable for CLI output.

    Without an explicit ``level`` the ``READYTRACK_LOG_LEVEL`` variable decides,
    falling back to INFO. Pass ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(
        level=level if level is not None else resolve_log_level(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
