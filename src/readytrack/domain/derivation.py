"""Derive packaging and testing records back from the combined view.

Used when tracking happened on the combined rows (manual edits) and the
per-application stores have to catch up. One write transaction per call; each
derived row carries a ``<Source>_Generated_<timestamp>`` batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from readytrack.domain.model import ImportBatch, PackagingRecord, SourceType, TestingRecord
from readytrack.domain.propagation import has_value

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from readytrack.domain.model import CombinedRecord
    from readytrack.domain.ports import UnitOfWorkFactory

log = getLogger(__name__)

NOT_STARTED: Final[str] = "Not Started"

# combined test status -> derived test result
TEST_RESULTS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "Ready": NOT_STARTED,
        "In Progress": "In Progress",
        "Completed": "Passed",
    }
)


@dataclass(frozen=True, slots=True)
class DerivationResult:
    source: SourceType
    batch: ImportBatch
    count: int
    removed: int = 0


def _utcnow() -> datetime:
    return datetime.now(UTC)


def result_for_status(status: str) -> str:
    return TEST_RESULTS.get(status, NOT_STARTED)


def derived_packaging_values(rows: Iterable[CombinedRecord]) -> dict[str, dict[str, object]]:
    """One packaging row per application; later combined rows win."""

    derived: dict[str, dict[str, object]] = {}
    for row in rows:
        if not has_value(row.application_name) or not has_value(row.package_status):
            continue
        derived[row.application_name] = {
            "application_name": row.application_name,
            "status": row.package_status,
            "readiness_date": row.package_readiness_date,
        }
    return derived


def derived_testing_values(
    rows: Iterable[CombinedRecord],
    applications: set[str],
) -> dict[str, dict[str, object]]:
    """One testing row per known application with a test status or plan date."""

    derived: dict[str, dict[str, object]] = {}
    for row in rows:
        if row.application_name not in applications:
            continue
        if has_value(row.test_status):
            status = str(row.test_status)
            derived[row.application_name] = {
                "application_name": row.application_name,
                "status": status,
                "result": result_for_status(status),
                "test_date": row.test_date,
                "plan_date": row.test_plan_date,
                "comments": row.test_comments,
            }
        elif row.test_plan_date is not None:
            derived[row.application_name] = {
                "application_name": row.application_name,
                "status": NOT_STARTED,
                "result": NOT_STARTED,
                "test_date": None,
                "plan_date": row.test_plan_date,
                "comments": row.test_comments,
            }
    return derived


def derive_packaging_records(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    clock: Callable[[], datetime] = _utcnow,
) -> DerivationResult:
    """Upsert a packaging record for every application with a package status."""

    batch = ImportBatch.for_derivation(SourceType.PACKAGING, clock())
    with unit_of_work_factory() as uow:
        repository = uow.repositories.packaging
        derived = derived_packaging_values(uow.repositories.combined.list_all())
        for name, values in derived.items():
            existing = repository.get_by_key((name,))
            if existing is None:
                repository.add(
                    PackagingRecord(
                        **values,  # pyright: ignore[reportArgumentType]
                        imported_at=batch.imported_at,
                        import_batch=batch.label,
                    )
                )
            else:
                existing.replace_fields(values, batch)
        uow.commit()

    log.info(
        "Derivation finished operation=derive source=%s batch=%s count=%s",
        SourceType.PACKAGING.value,
        batch.label,
        len(derived),
    )
    return DerivationResult(source=SourceType.PACKAGING, batch=batch, count=len(derived))


def derive_testing_records(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    clock: Callable[[], datetime] = _utcnow,
) -> DerivationResult:
    """Replace the testing store with rows derived from the combined view.

    Only applications that still have access records are derived. A combined
    test status maps to a result (Ready and unknown statuses become
    ``Not Started``, Completed becomes ``Passed``); rows carrying only a plan
    date are derived as ``Not Started``.
    """

    batch = ImportBatch.for_derivation(SourceType.TESTING, clock())
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        removed = repositories.testing.clear()
        applications = set(repositories.access.application_names())
        derived = derived_testing_values(repositories.combined.list_all(), applications)
        for values in derived.values():
            repositories.testing.add(
                TestingRecord(
                    **values,  # pyright: ignore[reportArgumentType]
                    imported_at=batch.imported_at,
                    import_batch=batch.label,
                )
            )
        uow.commit()

    log.info(
        "Derivation finished operation=derive source=%s batch=%s count=%s removed=%s",
        SourceType.TESTING.value,
        batch.label,
        len(derived),
        removed,
    )
    return DerivationResult(
        source=SourceType.TESTING,
        batch=batch,
        count=len(derived),
        removed=removed,
    )
