"""Public domain model surface."""

from __future__ import annotations

from readytrack.domain.model.candidates import (
    CANDIDATE_TYPES,
    AccessCandidate,
    ClusterCandidate,
    EmploymentCandidate,
    ImportCandidate,
    MigrationPlanCandidate,
    PackagingCandidate,
    TestingCandidate,
    candidate_values,
)
from readytrack.domain.model.entity import Entity, new_id
from readytrack.domain.model.enums import DataType, ReadinessLabel, SourceType
from readytrack.domain.model.provenance import ImportBatch
from readytrack.domain.model.records import (
    NOT_AVAILABLE,
    AccessRecord,
    ClusterRecord,
    CombinedRecord,
    EmploymentRecord,
    MigrationPlanRecord,
    PackagingRecord,
    StoredRecord,
    TestingRecord,
)

RECORD_TYPES: dict[DataType, type[StoredRecord]] = {
    DataType.ACCESS: AccessRecord,
    DataType.EMPLOYMENT: EmploymentRecord,
    DataType.COMBINED: CombinedRecord,
    DataType.PACKAGING: PackagingRecord,
    DataType.TESTING: TestingRecord,
    DataType.MIGRATION_PLAN: MigrationPlanRecord,
    DataType.CLUSTER: ClusterRecord,
}

__all__ = [  # noqa: RUF022
    # candidates
    "AccessCandidate",
    "CANDIDATE_TYPES",
    "ClusterCandidate",
    "EmploymentCandidate",
    "ImportCandidate",
    "MigrationPlanCandidate",
    "PackagingCandidate",
    "TestingCandidate",
    "candidate_values",
    # identity and provenance
    "Entity",
    "ImportBatch",
    "new_id",
    # enums
    "DataType",
    "ReadinessLabel",
    "SourceType",
    # records
    "AccessRecord",
    "ClusterRecord",
    "CombinedRecord",
    "EmploymentRecord",
    "MigrationPlanRecord",
    "NOT_AVAILABLE",
    "PackagingRecord",
    "RECORD_TYPES",
    "StoredRecord",
    "TestingRecord",
]
