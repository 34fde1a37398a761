from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import pytest

from readytrack.domain.derivation import (
    derive_packaging_records,
    derive_testing_records,
    derived_packaging_values,
    derived_testing_values,
    result_for_status,
)
from readytrack.domain.editing import edit_combined_row
from readytrack.domain.importing import import_records
from readytrack.domain.model import (
    NOT_AVAILABLE,
    CombinedRecord,
    PackagingCandidate,
    SourceType,
    TestingCandidate,
)
from readytrack.domain.rebuild import rebuild_combined
from tests.helpers.records import seed_scenario

if TYPE_CHECKING:
    from readytrack.domain.ports import UnitOfWorkFactory
    from tests.helpers.records import SteppingClock

STAMP = datetime(2026, 10, 18, 9, 0, tzinfo=UTC)


def _row(account: str, application: str, **fields: object) -> CombinedRecord:
    return CombinedRecord(
        access_group="G1",
        account=account,
        application_name=application,
        imported_at=STAMP,
        import_batch="Combined_20261018_090000_000000",
        **fields,  # pyright: ignore[reportArgumentType]
    )


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        ("Ready", "Not Started"),
        ("In Progress", "In Progress"),
        ("Completed", "Passed"),
        ("Blocked", "Not Started"),
    ],
)
def test_result_for_status(status: str, expected: str) -> None:
    assert result_for_status(status) == expected


def test_packaging_values_one_per_application() -> None:
    rows = [
        _row("u1", "AppA", package_status="Planned"),
        _row("u2", "AppA", package_status="Ready", package_readiness_date=date(2026, 11, 1)),
        _row("u3", "AppB"),
        _row("u4", NOT_AVAILABLE, package_status="Ready"),
    ]

    assert derived_packaging_values(rows) == {
        "AppA": {
            "application_name": "AppA",
            "status": "Ready",
            "readiness_date": date(2026, 11, 1),
        }
    }


def test_testing_values_map_status_and_plan_dates() -> None:
    rows = [
        _row("u1", "AppA", test_status="Completed", test_date=date(2026, 10, 1)),
        _row("u2", "AppB", test_plan_date=date(2026, 12, 1)),
        _row("u3", "AppC"),
        _row("u4", "AppGone", test_status="Ready"),
    ]

    derived = derived_testing_values(rows, {"AppA", "AppB", "AppC"})

    assert set(derived) == {"AppA", "AppB"}
    assert derived["AppA"]["status"] == "Completed"
    assert derived["AppA"]["result"] == "Passed"
    assert derived["AppA"]["test_date"] == date(2026, 10, 1)
    assert derived["AppB"]["status"] == derived["AppB"]["result"] == "Not Started"
    assert derived["AppB"]["test_date"] is None
    assert derived["AppB"]["plan_date"] == date(2026, 12, 1)


def test_derive_packaging_upserts_from_combined(
    write_uow: UnitOfWorkFactory, clock: SteppingClock
) -> None:
    seed_scenario(write_uow, clock)
    rebuild_combined(unit_of_work_factory=write_uow, clock=clock)
    import_records(
        SourceType.PACKAGING,
        [PackagingCandidate("AppA", "Planned")],
        unit_of_work_factory=write_uow,
        clock=clock,
    )
    with write_uow() as uow:
        original = uow.repositories.packaging.get_by_key(("AppA",))
        assert original is not None
        original_id = original.id
    edit_combined_row(
        "G1",
        "u2",
        {"package_status": "Ready", "package_readiness_date": date(2026, 11, 1)},
        unit_of_work_factory=write_uow,
    )

    result = derive_packaging_records(unit_of_work_factory=write_uow, clock=clock)

    assert result.count == 1
    assert result.batch.label.startswith("Packaging_Generated_")
    with write_uow() as uow:
        records = uow.repositories.packaging.list_all()
    assert [(record.id, record.status, record.readiness_date) for record in records] == [
        (original_id, "Ready", date(2026, 11, 1))
    ]
    assert records[0].import_batch == result.batch.label


def test_derive_testing_replaces_store(
    write_uow: UnitOfWorkFactory, clock: SteppingClock
) -> None:
    seed_scenario(write_uow, clock)
    rebuild_combined(unit_of_work_factory=write_uow, clock=clock)
    import_records(
        SourceType.TESTING,
        [TestingCandidate("AppZ", "Done", "Passed")],
        unit_of_work_factory=write_uow,
        clock=clock,
    )
    edit_combined_row(
        "G1",
        "u1",
        {"test_status": "Completed", "test_date": date(2026, 10, 20)},
        unit_of_work_factory=write_uow,
    )

    result = derive_testing_records(unit_of_work_factory=write_uow, clock=clock)

    assert (result.count, result.removed) == (1, 1)
    assert result.batch.label.startswith("Testing_Generated_")
    with write_uow() as uow:
        records = uow.repositories.testing.list_all()
    assert [
        (record.application_name, record.status, record.result, record.test_date)
        for record in records
    ] == [("AppA", "Completed", "Passed", date(2026, 10, 20))]


def test_derive_from_empty_combined_view(
    write_uow: UnitOfWorkFactory, clock: SteppingClock
) -> None:
    packaging = derive_packaging_records(unit_of_work_factory=write_uow, clock=clock)
    testing = derive_testing_records(unit_of_work_factory=write_uow, clock=clock)

    assert (packaging.count, testing.count, testing.removed) == (0, 0, 0)
