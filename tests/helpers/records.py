"""Builders and seeding helpers for readytrack tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from readytrack.domain.importing import import_records
from readytrack.domain.model import (
    AccessCandidate,
    EmploymentCandidate,
    SourceType,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from readytrack.domain.model import CombinedRecord
    from readytrack.domain.ports import UnitOfWorkFactory


class SteppingClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 10, 18, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


def access(
    group: str,
    account: str,
    application: str | None = "AppA",
    **extra: str | None,
) -> AccessCandidate:
    return AccessCandidate(
        access_group=group,
        account=account,
        application_name=application,
        **extra,
    )


def employment(
    account: str,
    department: str | None = None,
    **extra: str | None,
) -> EmploymentCandidate:
    return EmploymentCandidate(account=account, department=department, **extra)


def seed_scenario(
    unit_of_work_factory: UnitOfWorkFactory,
    clock: Callable[[], datetime],
) -> None:
    """Two AppA accounts in G1; only u1 has HR data (department Finance)."""

    import_records(
        SourceType.ACCESS,
        [access("G1", "u1", "AppA"), access("G1", "u2", "AppA")],
        unit_of_work_factory=unit_of_work_factory,
        clock=clock,
    )
    import_records(
        SourceType.EMPLOYMENT,
        [employment("u1", "Finance")],
        unit_of_work_factory=unit_of_work_factory,
        clock=clock,
    )


def combined_by_account(unit_of_work_factory: UnitOfWorkFactory) -> dict[str, CombinedRecord]:
    with unit_of_work_factory() as uow:
        return {record.account: record for record in uow.repositories.combined.list_all()}
