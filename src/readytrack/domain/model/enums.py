"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


def _squash(value: str) -> str:
    return "".join(ch for ch in value.lower() if ch.isalnum())


class SourceType(StrEnum):
    """The six independently imported datasets."""

    ACCESS = "Access"
    EMPLOYMENT = "Employment"
    PACKAGING = "Packaging"
    TESTING = "Testing"
    MIGRATION_PLAN = "MigrationPlan"
    CLUSTER = "Cluster"

    @classmethod
    def parse(cls, value: str) -> SourceType:
        """Accept ``migration-plan``, ``Migration Plan``, ``MIGRATION_PLAN`` and friends."""
        wanted = _squash(value)
        for member in cls:
            if _squash(member.value) == wanted:
                return member
        raise ValueError(f"Unknown source: {value!r}")

    @property
    def data_type(self) -> DataType:
        return DataType(self.value)


class DataType(StrEnum):
    """Every queryable store: the six sources plus the combined view."""

    ACCESS = "Access"
    EMPLOYMENT = "Employment"
    COMBINED = "Combined"
    PACKAGING = "Packaging"
    TESTING = "Testing"
    MIGRATION_PLAN = "MigrationPlan"
    CLUSTER = "Cluster"

    @classmethod
    def parse(cls, value: str) -> DataType:
        wanted = _squash(value)
        for member in cls:
            if _squash(member.value) == wanted:
                return member
        raise ValueError(f"Unknown data type: {value!r}")

    @property
    def source(self) -> SourceType | None:
        if self is DataType.COMBINED:
            return None
        return SourceType(self.value)


class ReadinessLabel(StrEnum):
    """Migration-cluster progress labels, in workflow order."""

    ORDERLIST_TO_DEP = "Orderlist to Dep"
    ORDERLIST_CONFIRMED = "Orderlist Confirmed"
    WAITING_FOR_APPS = "Waiting for Apps"
    ON_HOLD = "On Hold"
    READY_TO_START = "Ready to Start"
    PLANNED = "Planned"
    EXECUTED = "Executed"
    AFTERCARE_OK = "Aftercare OK"
    DECHARGE = "Decharge"

    @classmethod
    def match(cls, value: str) -> ReadinessLabel | None:
        """Return the label matching ``value`` case-insensitively, if any."""
        wanted = " ".join(value.split()).casefold()
        for member in cls:
            if member.value.casefold() == wanted:
                return member
        return None
