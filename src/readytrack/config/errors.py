"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration values are absent or blank."""


class UnknownEnvironmentError(ConfigurationError):
    """Raised when an environment name does not match any deployment stage."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown environment: {name!r}")
        self.name = name
