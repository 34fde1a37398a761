"""Import-batch provenance stamped on every persisted row."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from readytrack.domain.model.enums import SourceType

BATCH_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d_%H%M%S_%f"
COMBINED_PREFIX: Final[str] = "Combined"


@dataclass(frozen=True, slots=True)
class ImportBatch:
    """A labelled group of rows touched by one import or rebuild call.

    Labels sort in creation order because the timestamp is zero-padded down to
    the microsecond, e.g. ``Packaging_Import_20261018_142501_000123``.
    """

    label: str
    imported_at: datetime

    @classmethod
    def for_source(cls, source: SourceType, at: datetime) -> ImportBatch:
        stamp = _as_utc(at)
        return cls(label=f"{source.value}_Import_{stamp:{BATCH_TIMESTAMP_FORMAT}}", imported_at=stamp)

    @classmethod
    def for_derivation(cls, source: SourceType, at: datetime) -> ImportBatch:
        stamp = _as_utc(at)
        return cls(
            label=f"{source.value}_Generated_{stamp:{BATCH_TIMESTAMP_FORMAT}}", imported_at=stamp
        )

    @classmethod
    def for_rebuild(cls, at: datetime) -> ImportBatch:
        stamp = _as_utc(at)
        return cls(label=f"{COMBINED_PREFIX}_{stamp:{BATCH_TIMESTAMP_FORMAT}}", imported_at=stamp)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
