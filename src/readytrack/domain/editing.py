"""Manual corrections to single combined rows.

A combined row is addressed by ``(access_group, account)``. Only the tracking
columns people maintain by hand are editable; everything else is owned by the
sources and rewritten on the next rebuild.
"""

from __future__ import annotations

from datetime import date
from logging import getLogger
from typing import TYPE_CHECKING, Final

from readytrack.config import DISPLAY_DATE_FORMAT
from readytrack.domain.errors import RecordNotFoundError
from readytrack.domain.model import DataType
from readytrack.domain.query import FieldKind, field_registry, parse_display_date

if TYPE_CHECKING:
    from collections.abc import Mapping

    from readytrack.domain.model import CombinedRecord
    from readytrack.domain.ports import UnitOfWorkFactory

log = getLogger(__name__)

EDITABLE_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "package_status",
        "package_readiness_date",
        "test_status",
        "test_date",
        "department_simple",
        "migration_cluster",
    }
)


def _check_changes(changes: Mapping[str, object]) -> None:
    if not changes:
        raise ValueError("No changes supplied")
    locked = sorted(set(changes) - EDITABLE_FIELDS)
    if locked:
        raise ValueError(f"Combined field(s) not editable: {', '.join(locked)}")
    registry = field_registry(DataType.COMBINED)
    for spec in registry.fields:
        if spec.attribute not in changes:
            continue
        value = changes[spec.attribute]
        expected = date if spec.kind is FieldKind.DATE else str
        if value is not None and not isinstance(value, expected):
            raise ValueError(f"{spec.label} expects {expected.__name__}, got {value!r}")


def edit_combined_row(
    access_group: str,
    account: str,
    changes: Mapping[str, object],
    *,
    unit_of_work_factory: UnitOfWorkFactory,
) -> CombinedRecord:
    """Apply ``changes`` to one existing combined row and return it.

    Raises ``RecordNotFoundError`` when no row holds the key; nothing is
    written in that case.
    """

    _check_changes(changes)
    key = (access_group, account)
    with unit_of_work_factory() as uow:
        combined = uow.repositories.combined
        record = combined.get_by_key(key)
        if record is None:
            raise RecordNotFoundError(DataType.COMBINED.value, key)
        combined.update_row(key, changes)
        uow.commit()

    log.info(
        "Combined row edited operation=edit access_group=%s account=%s fields=%s",
        access_group,
        account,
        sorted(changes),
    )
    return record


def edit_combined_field(
    access_group: str,
    account: str,
    field_label: str,
    value: str | None,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    date_format: str = DISPLAY_DATE_FORMAT,
) -> CombinedRecord:
    """Label-based variant: date fields take the display format, blank clears."""

    spec = field_registry(DataType.COMBINED).resolve(field_label)
    parsed: object = None
    if value is not None and value.strip():
        parsed = (
            parse_display_date(value, date_format=date_format)
            if spec.kind is FieldKind.DATE
            else value.strip()
        )
    return edit_combined_row(
        access_group,
        account,
        {spec.attribute: parsed},
        unit_of_work_factory=unit_of_work_factory,
    )
