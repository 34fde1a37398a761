"""Ports for persisting source, combined and query-able records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from readytrack.domain.model import (
    AccessRecord,
    ClusterRecord,
    CombinedRecord,
    EmploymentRecord,
    MigrationPlanRecord,
    PackagingRecord,
    StoredRecord,
    TestingRecord,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from readytrack.domain.model import ImportBatch
    from readytrack.domain.query import QueryCriterion


@runtime_checkable
class Repository[TRecord: StoredRecord](Protocol):
    """Minimal repository contract for one keyed store."""

    def add(self, record: TRecord) -> None:
        """Insert a new row; raises ``DuplicateRecordError`` on a key collision."""
        ...

    def get_by_key(self, key: tuple[str, ...]) -> TRecord | None: ...

    def list_all(self) -> list[TRecord]: ...

    def list_page(self, *, limit: int, offset: int = 0) -> list[TRecord]: ...

    def find(self, criterion: QueryCriterion, *, limit: int) -> list[TRecord]: ...

    def count(self) -> int: ...

    def clear(self) -> int: ...

    def latest_import(self) -> ImportBatch | None: ...


@runtime_checkable
class AccessRepository(Repository[AccessRecord], Protocol):
    """Anchor store. Application names feed the migration-plan guard."""

    def application_names(self) -> list[str]: ...

    def has_application(self, name: str, *, ignore_case: bool = False) -> bool: ...


@runtime_checkable
class EmploymentRepository(Repository[EmploymentRecord], Protocol):
    """HR store. Departments feed the cluster guard."""

    def departments(self) -> set[str]: ...


@runtime_checkable
class PackagingRepository(Repository[PackagingRecord], Protocol):
    """Packaging status per application."""


@runtime_checkable
class TestingRepository(Repository[TestingRecord], Protocol):
    """Test status per application."""


@runtime_checkable
class MigrationPlanRepository(Repository[MigrationPlanRecord], Protocol):
    """Migration plan per application."""


@runtime_checkable
class ClusterRepository(Repository[ClusterRecord], Protocol):
    """Migration cluster per department."""


@runtime_checkable
class CombinedRecordRepository(Repository[CombinedRecord], Protocol):
    """The materialized join. Rows are only ever bulk-replaced or patched."""

    def add_all(self, records: Iterable[CombinedRecord]) -> None: ...

    def update_matching(self, field: str, value: str, changes: Mapping[str, object]) -> int:
        """Set ``changes`` on every row whose ``field`` equals ``value``; return the count."""
        ...

    def update_row(self, key: tuple[str, ...], changes: Mapping[str, object]) -> int:
        """Set ``changes`` on the single row holding ``key``; return 1, or 0 if absent."""
        ...
