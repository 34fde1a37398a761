"""Purge operations used before re-seeding a store from scratch."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from readytrack.domain.model import DataType

if TYPE_CHECKING:
    from readytrack.domain.model import SourceType
    from readytrack.domain.ports import UnitOfWorkFactory

log = getLogger(__name__)


def clear_store(data_type: DataType, *, unit_of_work_factory: UnitOfWorkFactory) -> int:
    """Delete every row of one store and return how many were removed.

    Clearing a source leaves the combined view untouched until the next rebuild.
    """

    with unit_of_work_factory() as uow:
        removed = uow.repositories.for_data_type(data_type).clear()
        uow.commit()
    log.info("Store cleared operation=clear data_type=%s removed=%s", data_type.value, removed)
    return removed


def clear_source(source: SourceType, *, unit_of_work_factory: UnitOfWorkFactory) -> int:
    return clear_store(source.data_type, unit_of_work_factory=unit_of_work_factory)


def clear_combined(*, unit_of_work_factory: UnitOfWorkFactory) -> int:
    """Drop the combined view; the next rebuild recreates it."""
    return clear_store(DataType.COMBINED, unit_of_work_factory=unit_of_work_factory)
