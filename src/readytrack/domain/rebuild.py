"""Recompute the combined view from scratch.

The rebuild is a hash join anchored on access records: every other source is
loaded into a dict keyed by its natural key and looked up per access record.
The cluster is reached through the matched employment record's department,
so an account without HR data never gets cluster data either.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from readytrack.domain.errors import RebuildInvariantError
from readytrack.domain.model import CombinedRecord, ImportBatch

if TYPE_CHECKING:
    from collections.abc import Callable

    from readytrack.domain.model import (
        AccessRecord,
        ClusterRecord,
        EmploymentRecord,
        MigrationPlanRecord,
        PackagingRecord,
        TestingRecord,
    )
    from readytrack.domain.ports import UnitOfWorkFactory

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RebuildResult:
    count: int
    removed: int
    batch: ImportBatch


def _utcnow() -> datetime:
    return datetime.now(UTC)


def combine(
    access: AccessRecord,
    *,
    employment: EmploymentRecord | None,
    packaging: PackagingRecord | None,
    testing: TestingRecord | None,
    migration_plan: MigrationPlanRecord | None,
    cluster: ClusterRecord | None,
    batch: ImportBatch,
) -> CombinedRecord:
    """Merge one access record with whatever matched it."""

    department_simple = None
    if cluster is not None and cluster.department_simple is not None:
        department_simple = cluster.department_simple
    elif employment is not None:
        department_simple = employment.department_simple

    return CombinedRecord(
        access_group=access.access_group,
        account=access.account,
        application_name=access.application_name,
        application_suite=access.application_suite,
        environment_tier=access.environment_tier,
        criticality=access.criticality,
        department=employment.department if employment else None,
        job_role=employment.job_role if employment else None,
        division=employment.division if employment else None,
        leave_date=employment.leave_date if employment else None,
        package_status=packaging.status if packaging else None,
        package_readiness_date=packaging.readiness_date if packaging else None,
        test_status=testing.status if testing else None,
        test_date=testing.test_date if testing else None,
        test_result=testing.result if testing else None,
        test_plan_date=testing.plan_date if testing else None,
        test_comments=testing.comments if testing else None,
        application_new=migration_plan.application_new if migration_plan else None,
        suite_new=migration_plan.suite_new if migration_plan else None,
        target_application=migration_plan.target_application if migration_plan else None,
        scope_division=migration_plan.scope_division if migration_plan else None,
        migration_platform=migration_plan.platform if migration_plan else None,
        migration_readiness=migration_plan.readiness if migration_plan else None,
        department_simple=department_simple,
        domain=cluster.domain if cluster else None,
        migration_cluster=cluster.migration_cluster if cluster else None,
        cluster_readiness=cluster.cluster_readiness if cluster else None,
        imported_at=batch.imported_at,
        import_batch=batch.label,
    )


def rebuild_combined(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    clock: Callable[[], datetime] = _utcnow,
) -> RebuildResult:
    """Delete every combined row and insert one per access record, in one transaction."""

    batch = ImportBatch.for_rebuild(clock())
    log.info("Rebuild started operation=rebuild batch=%s", batch.label)

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        removed = repositories.combined.clear()

        access_records = repositories.access.list_all()
        employment = {record.account: record for record in repositories.employment.list_all()}
        packaging = {record.application_name: record for record in repositories.packaging.list_all()}
        testing = {record.application_name: record for record in repositories.testing.list_all()}
        plans = {
            record.application_name: record for record in repositories.migration_plans.list_all()
        }
        clusters = {record.department: record for record in repositories.clusters.list_all()}

        combined: list[CombinedRecord] = []
        for access in access_records:
            matched_employment = employment.get(access.account)
            department = matched_employment.department if matched_employment else None
            combined.append(
                combine(
                    access,
                    employment=matched_employment,
                    packaging=packaging.get(access.application_name),
                    testing=testing.get(access.application_name),
                    migration_plan=plans.get(access.application_name),
                    cluster=clusters.get(department) if department else None,
                    batch=batch,
                )
            )
        repositories.combined.add_all(combined)

        count = repositories.combined.count()
        if count != len(access_records):
            raise RebuildInvariantError(
                f"Rebuild produced {count} combined records for {len(access_records)} access records"
            )
        uow.commit()

    log.info(
        "Rebuild finished operation=rebuild batch=%s removed=%s combined=%s",
        batch.label,
        removed,
        count,
    )
    return RebuildResult(count=count, removed=removed, batch=batch)
