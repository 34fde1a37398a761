"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from readytrack.domain.model import DataType

if TYPE_CHECKING:
    from types import TracebackType

    from readytrack.domain.model import SourceType
    from readytrack.domain.ports.persistence import (
        AccessRepository,
        ClusterRepository,
        CombinedRecordRepository,
        EmploymentRepository,
        MigrationPlanRepository,
        PackagingRepository,
        Repository,
        TestingRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class StoreRepositories(RepositoryCollection):
    """Every store readytrack keeps, addressable by data type."""

    access: AccessRepository
    employment: EmploymentRepository
    packaging: PackagingRepository
    testing: TestingRepository
    migration_plans: MigrationPlanRepository
    clusters: ClusterRepository
    combined: CombinedRecordRepository

    def for_data_type(self, data_type: DataType) -> Repository:  # pyright: ignore[reportMissingTypeArgument]
        match data_type:
            case DataType.ACCESS:
                return self.access
            case DataType.EMPLOYMENT:
                return self.employment
            case DataType.PACKAGING:
                return self.packaging
            case DataType.TESTING:
                return self.testing
            case DataType.MIGRATION_PLAN:
                return self.migration_plans
            case DataType.CLUSTER:
                return self.clusters
            case DataType.COMBINED:
                return self.combined

    def for_source(self, source: SourceType) -> Repository:  # pyright: ignore[reportMissingTypeArgument]
        return self.for_data_type(source.data_type)


type StoreUnitOfWork = UnitOfWork[StoreRepositories]
type UnitOfWorkFactory = Callable[[], StoreUnitOfWork]
