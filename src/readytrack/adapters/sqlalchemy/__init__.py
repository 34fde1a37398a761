"""SQLAlchemy adapter package for readytrack."""

from __future__ import annotations

from .engine import create_store_engine
from .mappings import TABLE_BY_DATA_TYPE, create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyAccessRepository,
    SqlAlchemyClusterRepository,
    SqlAlchemyCombinedRecordRepository,
    SqlAlchemyEmploymentRepository,
    SqlAlchemyMigrationPlanRepository,
    SqlAlchemyPackagingRepository,
    SqlAlchemyRecordRepository,
    SqlAlchemyTestingRepository,
)
from .unit_of_work import SqlAlchemyStore, SqlAlchemyUnitOfWork

__all__ = [
    "TABLE_BY_DATA_TYPE",
    "SqlAlchemyAccessRepository",
    "SqlAlchemyClusterRepository",
    "SqlAlchemyCombinedRecordRepository",
    "SqlAlchemyEmploymentRepository",
    "SqlAlchemyMigrationPlanRepository",
    "SqlAlchemyPackagingRepository",
    "SqlAlchemyRecordRepository",
    "SqlAlchemyStore",
    "SqlAlchemyTestingRepository",
    "SqlAlchemyUnitOfWork",
    "create_all_tables",
    "create_store_engine",
    "mapper_registry",
    "start_mappers",
]
