"""Query engine limits and display formats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import int_env_var
from .errors import ConfigurationError

MAX_QUERY_RESULTS: Final[int] = 1000
DISPLAY_DATE_FORMAT: Final[str] = "%b %d, %Y"
QUERY_LIMIT_ENV: Final[str] = "READYTRACK_QUERY_LIMIT"


@dataclass(frozen=True, slots=True)
class QueryConfig:
    max_results: int = MAX_QUERY_RESULTS
    date_format: str = DISPLAY_DATE_FORMAT

    def __post_init__(self) -> None:
        if not 0 < self.max_results <= MAX_QUERY_RESULTS:
            raise ConfigurationError(
                f"Query limit must be between 1 and {MAX_QUERY_RESULTS}, got {self.max_results}"
            )


def get_query_config() -> QueryConfig:
    return QueryConfig(max_results=int_env_var(QUERY_LIMIT_ENV, default=MAX_QUERY_RESULTS))
