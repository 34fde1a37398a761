"""Read-side helpers: store status, pagination and application lookups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from readytrack.domain.model import DataType

if TYPE_CHECKING:
    from datetime import datetime

    from readytrack.domain.model import StoredRecord
    from readytrack.domain.ports import UnitOfWorkFactory


@dataclass(frozen=True, slots=True)
class StoreStatus:
    data_type: DataType
    count: int
    latest_batch: str | None = None
    latest_import: datetime | None = None


@dataclass(frozen=True, slots=True)
class StoreSummary:
    stores: tuple[StoreStatus, ...]

    def status(self, data_type: DataType) -> StoreStatus:
        for status in self.stores:
            if status.data_type is data_type:
                return status
        raise KeyError(data_type)

    @property
    def combined_is_current(self) -> bool:
        """The combined view holds exactly one row per access record."""
        return self.status(DataType.COMBINED).count == self.status(DataType.ACCESS).count


def summarize_store(*, unit_of_work_factory: UnitOfWorkFactory) -> StoreSummary:
    statuses: list[StoreStatus] = []
    with unit_of_work_factory() as uow:
        for data_type in DataType:
            repository = uow.repositories.for_data_type(data_type)
            latest = repository.latest_import()
            statuses.append(
                StoreStatus(
                    data_type=data_type,
                    count=repository.count(),
                    latest_batch=latest.label if latest else None,
                    latest_import=latest.imported_at if latest else None,
                )
            )
    return StoreSummary(stores=tuple(statuses))


def list_records(
    data_type: DataType,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    limit: int,
    offset: int = 0,
) -> list[StoredRecord]:
    """Return one page of ``data_type`` rows ordered by natural key."""

    if limit <= 0 or offset < 0:
        raise ValueError("limit must be positive and offset non-negative")
    with unit_of_work_factory() as uow:
        return uow.repositories.for_data_type(data_type).list_page(limit=limit, offset=offset)


def fetch_all(
    data_type: DataType,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
) -> list[StoredRecord]:
    """Every row of one store, ordered by natural key."""
    with unit_of_work_factory() as uow:
        return uow.repositories.for_data_type(data_type).list_all()


def application_names(*, unit_of_work_factory: UnitOfWorkFactory) -> list[str]:
    with unit_of_work_factory() as uow:
        return uow.repositories.access.application_names()


def has_application(name: str, *, unit_of_work_factory: UnitOfWorkFactory) -> bool:
    """Case-insensitive membership test against access-record application names."""
    with unit_of_work_factory() as uow:
        return uow.repositories.access.has_application(name.strip(), ignore_case=True)
