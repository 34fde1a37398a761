"""Translate validated spreadsheet rows into import candidates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from readytrack.domain.model import (
    AccessCandidate,
    ClusterCandidate,
    EmploymentCandidate,
    MigrationPlanCandidate,
    PackagingCandidate,
    SourceType,
    TestingCandidate,
)

from .schema import (
    AccessRow,
    ClusterRow,
    EmploymentRow,
    MigrationPlanRow,
    PackagingRow,
    TabularRow,
    TestingRow,
)

if TYPE_CHECKING:
    from readytrack.domain.model import ImportCandidate

ROW_MODELS: dict[SourceType, type[TabularRow]] = {
    SourceType.ACCESS: AccessRow,
    SourceType.EMPLOYMENT: EmploymentRow,
    SourceType.PACKAGING: PackagingRow,
    SourceType.TESTING: TestingRow,
    SourceType.MIGRATION_PLAN: MigrationPlanRow,
    SourceType.CLUSTER: ClusterRow,
}


def translate_row(row: TabularRow) -> ImportCandidate:
    match row:
        case AccessRow():
            return AccessCandidate(**row.model_dump())
        case EmploymentRow():
            return EmploymentCandidate(**row.model_dump())
        case PackagingRow():
            return PackagingCandidate(**row.model_dump())
        case TestingRow():
            return TestingCandidate(**row.model_dump())
        case MigrationPlanRow():
            return MigrationPlanCandidate(**row.model_dump())
        case ClusterRow():
            return ClusterCandidate(**row.model_dump())
        case _:
            raise TypeError(f"Unsupported row model: {type(row).__name__}")
