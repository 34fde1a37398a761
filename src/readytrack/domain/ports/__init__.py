"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    AccessRepository,
    ClusterRepository,
    CombinedRecordRepository,
    EmploymentRepository,
    MigrationPlanRepository,
    PackagingRepository,
    Repository,
    TestingRepository,
)
from .unit_of_work import (
    RepositoryCollection,
    StoreRepositories,
    StoreUnitOfWork,
    UnitOfWork,
    UnitOfWorkFactory,
)

__all__ = [
    "AccessRepository",
    "ClusterRepository",
    "CombinedRecordRepository",
    "EmploymentRepository",
    "MigrationPlanRepository",
    "PackagingRepository",
    "Repository",
    "RepositoryCollection",
    "StoreRepositories",
    "StoreUnitOfWork",
    "TestingRepository",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
