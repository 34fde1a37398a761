"""Import candidates: business fields only, as handed over by a parser.

Identity and provenance are assigned by the importer, never by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, ClassVar

from readytrack.domain.model.enums import SourceType

if TYPE_CHECKING:
    from datetime import date


@dataclass(frozen=True, slots=True)
class AccessCandidate:
    SOURCE: ClassVar[SourceType] = SourceType.ACCESS

    access_group: str
    account: str
    application_name: str | None = None
    application_suite: str | None = None
    environment_tier: str | None = None
    criticality: str | None = None


@dataclass(frozen=True, slots=True)
class EmploymentCandidate:
    SOURCE: ClassVar[SourceType] = SourceType.EMPLOYMENT

    account: str
    department: str | None = None
    job_role: str | None = None
    division: str | None = None
    leave_date: date | None = None
    department_simple: str | None = None


@dataclass(frozen=True, slots=True)
class PackagingCandidate:
    SOURCE: ClassVar[SourceType] = SourceType.PACKAGING

    application_name: str
    status: str
    readiness_date: date | None = None


@dataclass(frozen=True, slots=True)
class TestingCandidate:
    __test__ = False  # keep pytest from collecting it
    SOURCE: ClassVar[SourceType] = SourceType.TESTING

    application_name: str
    status: str
    result: str
    test_date: date | None = None
    plan_date: date | None = None
    comments: str | None = None


@dataclass(frozen=True, slots=True)
class MigrationPlanCandidate:
    SOURCE: ClassVar[SourceType] = SourceType.MIGRATION_PLAN

    application_name: str
    application_new: str | None = None
    suite_new: str | None = None
    target_application: str | None = None
    scope_division: str | None = None
    platform: str | None = None
    readiness: str | None = None


@dataclass(frozen=True, slots=True)
class ClusterCandidate:
    SOURCE: ClassVar[SourceType] = SourceType.CLUSTER

    department: str
    department_simple: str | None = None
    domain: str | None = None
    migration_cluster: str | None = None
    cluster_readiness: str | None = None


type ImportCandidate = (
    AccessCandidate
    | EmploymentCandidate
    | PackagingCandidate
    | TestingCandidate
    | MigrationPlanCandidate
    | ClusterCandidate
)

CANDIDATE_TYPES: dict[SourceType, type[ImportCandidate]] = {
    SourceType.ACCESS: AccessCandidate,
    SourceType.EMPLOYMENT: EmploymentCandidate,
    SourceType.PACKAGING: PackagingCandidate,
    SourceType.TESTING: TestingCandidate,
    SourceType.MIGRATION_PLAN: MigrationPlanCandidate,
    SourceType.CLUSTER: ClusterCandidate,
}


def candidate_values(candidate: ImportCandidate) -> dict[str, object]:
    return {item.name: getattr(candidate, item.name) for item in fields(candidate)}
