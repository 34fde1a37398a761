"""SQLAlchemy mapping metadata for the readytrack domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Dialect,
    Index,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from readytrack.domain.model import (
    NOT_AVAILABLE,
    AccessRecord,
    ClusterRecord,
    CombinedRecord,
    DataType,
    EmploymentRecord,
    MigrationPlanRecord,
    PackagingRecord,
    StoredRecord,
    TestingRecord,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(table_name)s_%(column_0_N_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _identity_columns() -> list[Column[object]]:
    return [Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4)]


def _provenance_columns() -> list[Column[object]]:
    return [
        Column("imported_at", UTCDateTime(), nullable=False),
        Column("import_batch", String, nullable=False),
    ]


def _access_columns() -> list[Column[object]]:
    return [
        Column("access_group", String, nullable=False),
        Column("account", String, nullable=False),
        Column("application_name", String, nullable=False, server_default=NOT_AVAILABLE),
        Column("application_suite", String, nullable=False, server_default=NOT_AVAILABLE),
        Column("environment_tier", String, nullable=False, server_default=NOT_AVAILABLE),
        Column("criticality", String, nullable=False, server_default=NOT_AVAILABLE),
    ]


# Source stores ---------------------------------------------------------------

access_record_table = Table(
    "access_record",
    mapper_registry.metadata,
    *_identity_columns(),
    *_access_columns(),
    *_provenance_columns(),
    UniqueConstraint("access_group", "account"),
    Index(None, "application_name"),
)

employment_record_table = Table(
    "employment_record",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("account", String, nullable=False, unique=True),
    Column("department", String, nullable=True, index=True),
    Column("job_role", String, nullable=True),
    Column("division", String, nullable=True),
    Column("leave_date", Date, nullable=True),
    Column("department_simple", String, nullable=True),
    *_provenance_columns(),
)

packaging_record_table = Table(
    "packaging_record",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("application_name", String, nullable=False, unique=True),
    Column("status", String, nullable=False),
    Column("readiness_date", Date, nullable=True),
    *_provenance_columns(),
)

testing_record_table = Table(
    "testing_record",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("application_name", String, nullable=False, unique=True),
    Column("status", String, nullable=False),
    Column("result", String, nullable=False),
    Column("test_date", Date, nullable=True),
    Column("plan_date", Date, nullable=True),
    Column("comments", String, nullable=True),
    *_provenance_columns(),
)

migration_plan_record_table = Table(
    "migration_plan_record",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("application_name", String, nullable=False, unique=True),
    Column("application_new", String, nullable=True),
    Column("suite_new", String, nullable=True),
    Column("target_application", String, nullable=True),
    Column("scope_division", String, nullable=True),
    Column("platform", String, nullable=True),
    Column("readiness", String, nullable=True),
    *_provenance_columns(),
)

cluster_record_table = Table(
    "cluster_record",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("department", String, nullable=False, unique=True),
    Column("department_simple", String, nullable=True),
    Column("domain", String, nullable=True),
    Column("migration_cluster", String, nullable=True),
    Column("cluster_readiness", String, nullable=True),
    *_provenance_columns(),
)

# Combined view ---------------------------------------------------------------

combined_record_table = Table(
    "combined_record",
    mapper_registry.metadata,
    *_identity_columns(),
    *_access_columns(),
    Column("department", String, nullable=True, index=True),
    Column("job_role", String, nullable=True),
    Column("division", String, nullable=True),
    Column("leave_date", Date, nullable=True),
    Column("package_status", String, nullable=True),
    Column("package_readiness_date", Date, nullable=True),
    Column("test_status", String, nullable=True),
    Column("test_date", Date, nullable=True),
    Column("test_result", String, nullable=True),
    Column("test_plan_date", Date, nullable=True),
    Column("test_comments", String, nullable=True),
    Column("application_new", String, nullable=True),
    Column("suite_new", String, nullable=True),
    Column("target_application", String, nullable=True),
    Column("scope_division", String, nullable=True),
    Column("migration_platform", String, nullable=True),
    Column("migration_readiness", String, nullable=True),
    Column("department_simple", String, nullable=True),
    Column("domain", String, nullable=True),
    Column("migration_cluster", String, nullable=True),
    Column("cluster_readiness", String, nullable=True),
    *_provenance_columns(),
    UniqueConstraint("access_group", "account"),
    Index(None, "application_name"),
)

TABLE_BY_DATA_TYPE: dict[DataType, Table] = {
    DataType.ACCESS: access_record_table,
    DataType.EMPLOYMENT: employment_record_table,
    DataType.PACKAGING: packaging_record_table,
    DataType.TESTING: testing_record_table,
    DataType.MIGRATION_PLAN: migration_plan_record_table,
    DataType.CLUSTER: cluster_record_table,
    DataType.COMBINED: combined_record_table,
}

CLASS_BY_TABLE: dict[str, type[StoredRecord]] = {
    access_record_table.name: AccessRecord,
    employment_record_table.name: EmploymentRecord,
    packaging_record_table.name: PackagingRecord,
    testing_record_table.name: TestingRecord,
    migration_plan_record_table.name: MigrationPlanRecord,
    cluster_record_table.name: ClusterRecord,
    combined_record_table.name: CombinedRecord,
}


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    for table in TABLE_BY_DATA_TYPE.values():
        mapper_registry.map_imperatively(CLASS_BY_TABLE[table.name], table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata (schema tests only)."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
