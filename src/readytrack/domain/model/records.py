"""Persisted source records and the denormalized combined record.

Records are plain dataclasses mapped imperatively by the SQLAlchemy adapter.
Optional fields hold ``None`` when the source did not provide a value, or, on
a combined record, when the joined source had no matching row.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Final

from readytrack.domain.model.entity import Entity

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date, datetime

    from readytrack.domain.model.provenance import ImportBatch

NOT_AVAILABLE: Final[str] = "N/A"


@dataclass(eq=False, kw_only=True)
class StoredRecord(Entity):
    """Shared shape: natural key, business fields, provenance."""

    KEY_FIELDS: ClassVar[tuple[str, ...]]
    FIELDS: ClassVar[tuple[str, ...]]

    imported_at: datetime
    import_batch: str

    @property
    def natural_key(self) -> tuple[str, ...]:
        return tuple(getattr(self, name) for name in self.KEY_FIELDS)

    def business_values(self) -> dict[str, object]:
        return {name: getattr(self, name) for name in self.FIELDS}

    def replace_fields(self, values: Mapping[str, object], batch: ImportBatch) -> None:
        """Overwrite every non-key business field; identity and key stay put."""

        for name in self.FIELDS:
            if name in self.KEY_FIELDS:
                continue
            setattr(self, name, values.get(name))
        self.stamp(batch)

    def stamp(self, batch: ImportBatch) -> None:
        self.imported_at = batch.imported_at
        self.import_batch = batch.label


@dataclass(eq=False, kw_only=True)
class AccessRecord(StoredRecord):
    KEY_FIELDS: ClassVar[tuple[str, ...]] = ("access_group", "account")
    FIELDS: ClassVar[tuple[str, ...]] = (
        "access_group",
        "account",
        "application_name",
        "application_suite",
        "environment_tier",
        "criticality",
    )

    access_group: str
    account: str
    application_name: str = NOT_AVAILABLE
    application_suite: str = NOT_AVAILABLE
    environment_tier: str = NOT_AVAILABLE
    criticality: str = NOT_AVAILABLE


@dataclass(eq=False, kw_only=True)
class EmploymentRecord(StoredRecord):
    KEY_FIELDS: ClassVar[tuple[str, ...]] = ("account",)
    FIELDS: ClassVar[tuple[str, ...]] = (
        "account",
        "department",
        "job_role",
        "division",
        "leave_date",
        "department_simple",
    )

    account: str
    department: str | None = None
    job_role: str | None = None
    division: str | None = None
    leave_date: date | None = None
    department_simple: str | None = None


@dataclass(eq=False, kw_only=True)
class PackagingRecord(StoredRecord):
    KEY_FIELDS: ClassVar[tuple[str, ...]] = ("application_name",)
    FIELDS: ClassVar[tuple[str, ...]] = ("application_name", "status", "readiness_date")

    application_name: str
    status: str
    readiness_date: date | None = None


@dataclass(eq=False, kw_only=True)
class TestingRecord(StoredRecord):
    __test__ = False  # keep pytest from collecting it

    KEY_FIELDS: ClassVar[tuple[str, ...]] = ("application_name",)
    FIELDS: ClassVar[tuple[str, ...]] = (
        "application_name",
        "status",
        "result",
        "test_date",
        "plan_date",
        "comments",
    )

    application_name: str
    status: str
    result: str
    test_date: date | None = None
    plan_date: date | None = None
    comments: str | None = None


@dataclass(eq=False, kw_only=True)
class MigrationPlanRecord(StoredRecord):
    KEY_FIELDS: ClassVar[tuple[str, ...]] = ("application_name",)
    FIELDS: ClassVar[tuple[str, ...]] = (
        "application_name",
        "application_new",
        "suite_new",
        "target_application",
        "scope_division",
        "platform",
        "readiness",
    )

    application_name: str
    application_new: str | None = None
    suite_new: str | None = None
    target_application: str | None = None
    scope_division: str | None = None
    platform: str | None = None
    readiness: str | None = None


@dataclass(eq=False, kw_only=True)
class ClusterRecord(StoredRecord):
    KEY_FIELDS: ClassVar[tuple[str, ...]] = ("department",)
    FIELDS: ClassVar[tuple[str, ...]] = (
        "department",
        "department_simple",
        "domain",
        "migration_cluster",
        "cluster_readiness",
    )

    department: str
    department_simple: str | None = None
    domain: str | None = None
    migration_cluster: str | None = None
    # canonical ReadinessLabel value
    cluster_readiness: str | None = None


@dataclass(eq=False, kw_only=True)
class CombinedRecord(StoredRecord):
    """One row per access record, joined with everything known about it."""

    KEY_FIELDS: ClassVar[tuple[str, ...]] = ("access_group", "account")
    FIELDS: ClassVar[tuple[str, ...]] = (
        *AccessRecord.FIELDS,
        "department",
        "job_role",
        "division",
        "leave_date",
        "package_status",
        "package_readiness_date",
        "test_status",
        "test_date",
        "test_result",
        "test_plan_date",
        "test_comments",
        "application_new",
        "suite_new",
        "target_application",
        "scope_division",
        "migration_platform",
        "migration_readiness",
        "department_simple",
        "domain",
        "migration_cluster",
        "cluster_readiness",
    )

    access_group: str
    account: str
    application_name: str = NOT_AVAILABLE
    application_suite: str = NOT_AVAILABLE
    environment_tier: str = NOT_AVAILABLE
    criticality: str = NOT_AVAILABLE

    department: str | None = None
    job_role: str | None = None
    division: str | None = None
    leave_date: date | None = None

    package_status: str | None = None
    package_readiness_date: date | None = None

    test_status: str | None = None
    test_date: date | None = None
    test_result: str | None = None
    test_plan_date: date | None = None
    test_comments: str | None = None

    application_new: str | None = None
    suite_new: str | None = None
    target_application: str | None = None
    scope_division: str | None = None
    migration_platform: str | None = None
    migration_readiness: str | None = None

    department_simple: str | None = None
    domain: str | None = None
    migration_cluster: str | None = None
    cluster_readiness: str | None = None
