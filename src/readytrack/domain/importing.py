"""Upsert importer: one write transaction per batch of candidates.

For every candidate the importer validates required fields, evaluates the
source's referential guard, then updates the row holding the same natural key
or inserts a new one. Problems with single candidates are recorded as skips;
only store failures abort (and roll back) the batch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from readytrack.domain.errors import DuplicateRecordError
from readytrack.domain.model import (
    CANDIDATE_TYPES,
    NOT_AVAILABLE,
    RECORD_TYPES,
    ImportBatch,
    ReadinessLabel,
    SourceType,
    candidate_values,
)
from readytrack.domain.propagation import has_value, is_propagatable, propagate

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from readytrack.domain.model import ImportCandidate, StoredRecord
    from readytrack.domain.ports import StoreRepositories, UnitOfWorkFactory

log = getLogger(__name__)

REQUIRED_FIELDS: dict[SourceType, tuple[str, ...]] = {
    SourceType.ACCESS: ("access_group", "account"),
    SourceType.EMPLOYMENT: ("account",),
    SourceType.PACKAGING: ("application_name", "status"),
    SourceType.TESTING: ("application_name", "status", "result"),
    SourceType.MIGRATION_PLAN: ("application_name",),
    SourceType.CLUSTER: ("department",),
}

# access records keep the sentinel rather than NULL for missing details
SENTINEL_DEFAULTS: dict[SourceType, tuple[str, ...]] = {
    SourceType.ACCESS: ("application_name", "application_suite", "environment_tier", "criticality"),
}


class SkipKind(StrEnum):
    VALIDATION = "validation"
    REFERENTIAL = "referential"
    DUPLICATE = "duplicate"


@dataclass(frozen=True, slots=True)
class SkipReason:
    kind: SkipKind
    position: int
    natural_key: tuple[str | None, ...]
    message: str

    def __str__(self) -> str:
        key = "/".join(part or "?" for part in self.natural_key)
        return f"#{self.position} [{key}] {self.kind.value}: {self.message}"


@dataclass(slots=True)
class ImportResult:
    """Outcome of one import call."""

    source: SourceType
    batch: ImportBatch
    saved: int = 0
    propagated: int = 0
    skip_reasons: list[SkipReason] = field(default_factory=list[SkipReason])

    @property
    def skipped(self) -> int:
        return len(self.skip_reasons)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _normalize(source: SourceType, candidate: ImportCandidate) -> dict[str, object]:
    values: dict[str, object] = {}
    for name, value in candidate_values(candidate).items():
        if isinstance(value, str):
            value = value.strip() or None  # noqa: PLW2901
        values[name] = value
    for name in SENTINEL_DEFAULTS.get(source, ()):
        if values.get(name) is None:
            values[name] = NOT_AVAILABLE
    return values


def _validate(source: SourceType, values: dict[str, object]) -> str | None:
    missing = [name for name in REQUIRED_FIELDS[source] if not has_value(values.get(name))]
    if missing:
        return f"missing required field(s): {', '.join(missing)}"

    if source is SourceType.CLUSTER:
        readiness = values.get("cluster_readiness")
        if not has_value(readiness):
            values["cluster_readiness"] = None
            return None
        label = ReadinessLabel.match(str(readiness))
        if label is None:
            return f"unknown cluster readiness {readiness!r}"
        values["cluster_readiness"] = label.value
    return None


type Guard = Callable[[dict[str, object]], str | None]


def _build_guard(source: SourceType, repositories: StoreRepositories) -> Guard | None:
    if source is SourceType.MIGRATION_PLAN:
        applications = set(repositories.access.application_names())

        def application_guard(values: dict[str, object]) -> str | None:
            name = values["application_name"]
            if name in applications:
                return None
            return f"application {name!r} has no access records"

        return application_guard

    if source is SourceType.CLUSTER:
        departments = repositories.employment.departments()

        def department_guard(values: dict[str, object]) -> str | None:
            department = values["department"]
            if department in departments:
                return None
            return f"department {department!r} has no employment records"

        return department_guard

    return None


def import_records(
    source: SourceType,
    candidates: Iterable[ImportCandidate],
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    clock: Callable[[], datetime] = _utcnow,
) -> ImportResult:
    """Upsert ``candidates`` into the store for ``source``.

    Every row written carries the same import batch. For packaging, testing,
    migration-plan and cluster records the written fields are propagated into
    existing combined rows in the same transaction.
    """

    expected_type = CANDIDATE_TYPES[source]
    record_type = RECORD_TYPES[source.data_type]
    result = ImportResult(source=source, batch=ImportBatch.for_source(source, clock()))
    log.info("Import started operation=import source=%s batch=%s", source.value, result.batch.label)

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        repository = repositories.for_source(source)
        guard = _build_guard(source, repositories)

        for position, candidate in enumerate(candidates, start=1):
            if not isinstance(candidate, expected_type):
                raise TypeError(
                    f"{source.value} import expects {expected_type.__name__}, "
                    f"got {type(candidate).__name__}"
                )
            values = _normalize(source, candidate)
            key = tuple(_key_part(values.get(name)) for name in record_type.KEY_FIELDS)

            problem = _validate(source, values)
            if problem is not None:
                _skip(result, SkipReason(SkipKind.VALIDATION, position, key, problem))
                continue
            if guard is not None and (problem := guard(values)) is not None:
                _skip(result, SkipReason(SkipKind.REFERENTIAL, position, key, problem))
                continue

            existing: StoredRecord | None = repository.get_by_key(key)  # pyright: ignore[reportArgumentType]
            if existing is None:
                record = record_type(
                    **values,
                    imported_at=result.batch.imported_at,
                    import_batch=result.batch.label,
                )
                try:
                    repository.add(record)
                except DuplicateRecordError as exc:
                    _skip(result, SkipReason(SkipKind.DUPLICATE, position, key, str(exc)))
                    continue
            else:
                existing.replace_fields(values, result.batch)

            result.saved += 1
            if is_propagatable(source):
                result.propagated += propagate(repositories.combined, source, str(key[0]), values)

        uow.commit()

    referential = sum(1 for reason in result.skip_reasons if reason.kind is SkipKind.REFERENTIAL)
    if referential:
        log.warning(
            "Referential guard rejected records source=%s batch=%s count=%s",
            source.value,
            result.batch.label,
            referential,
        )
    log.info(
        "Import finished operation=import source=%s batch=%s saved=%s skipped=%s propagated=%s",
        source.value,
        result.batch.label,
        result.saved,
        result.skipped,
        result.propagated,
    )
    return result


def _key_part(value: object) -> str | None:
    return None if value is None else str(value)


def _skip(result: ImportResult, reason: SkipReason) -> None:
    result.skip_reasons.append(reason)
    log.debug("Skipped batch=%s %s", result.batch.label, reason)
