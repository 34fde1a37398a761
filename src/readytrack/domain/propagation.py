"""Field propagation: patch existing combined rows after a single-source change.

Propagation never inserts or deletes combined rows. Only supplied values that
are non-empty and not ``"N/A"`` are written, so a packaging update leaves the
testing columns of the same row alone.
"""

from __future__ import annotations

from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from readytrack.domain.model import NOT_AVAILABLE, SourceType

if TYPE_CHECKING:
    from collections.abc import Mapping

    from readytrack.domain.ports import CombinedRecordRepository, UnitOfWorkFactory

log = getLogger(__name__)

# source field -> combined field
PROPAGATED_FIELDS: Final[Mapping[SourceType, Mapping[str, str]]] = MappingProxyType(
    {
        SourceType.PACKAGING: {
            "status": "package_status",
            "readiness_date": "package_readiness_date",
        },
        SourceType.TESTING: {
            "status": "test_status",
            "result": "test_result",
            "test_date": "test_date",
            "plan_date": "test_plan_date",
            "comments": "test_comments",
        },
        SourceType.MIGRATION_PLAN: {
            "application_new": "application_new",
            "suite_new": "suite_new",
            "target_application": "target_application",
            "scope_division": "scope_division",
            "platform": "migration_platform",
            "readiness": "migration_readiness",
        },
        SourceType.CLUSTER: {
            "department_simple": "department_simple",
            "domain": "domain",
            "migration_cluster": "migration_cluster",
            "cluster_readiness": "cluster_readiness",
        },
    }
)

# combined field carrying each source's natural key
MATCH_FIELDS: Final[Mapping[SourceType, str]] = MappingProxyType(
    {
        SourceType.PACKAGING: "application_name",
        SourceType.TESTING: "application_name",
        SourceType.MIGRATION_PLAN: "application_name",
        SourceType.CLUSTER: "department",
    }
)


def is_propagatable(source: SourceType) -> bool:
    return source in PROPAGATED_FIELDS


def has_value(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        stripped = value.strip()
        return bool(stripped) and stripped != NOT_AVAILABLE
    return True


def combined_changes(source: SourceType, changed_fields: Mapping[str, object]) -> dict[str, object]:
    """Translate source field names to combined columns, dropping empty values."""

    mapping = PROPAGATED_FIELDS.get(source)
    if mapping is None:
        raise ValueError(f"{source.value} records are not propagated into the combined view")
    return {
        mapping[name]: value
        for name, value in changed_fields.items()
        if name in mapping and has_value(value)
    }


def propagate(
    combined: CombinedRecordRepository,
    source: SourceType,
    natural_key: str,
    changed_fields: Mapping[str, object],
) -> int:
    """Patch every combined row matching ``natural_key``; return how many were updated.

    Zero matches is a no-op: the next rebuild picks the record up once an
    access record references it.
    """

    changes = combined_changes(source, changed_fields)
    if not changes:
        return 0
    updated = combined.update_matching(MATCH_FIELDS[source], natural_key, changes)
    log.debug(
        "Propagated source=%s key=%s fields=%s updated=%s",
        source.value,
        natural_key,
        sorted(changes),
        updated,
    )
    return updated


def propagate_changes(
    source: SourceType,
    natural_key: str,
    changed_fields: Mapping[str, object],
    *,
    unit_of_work_factory: UnitOfWorkFactory,
) -> int:
    """Run ``propagate`` in its own write transaction."""

    with unit_of_work_factory() as uow:
        updated = propagate(uow.repositories.combined, source, natural_key, changed_fields)
        uow.commit()
    log.info(
        "Propagation finished operation=propagate source=%s key=%s updated=%s",
        source.value,
        natural_key,
        updated,
    )
    return updated
