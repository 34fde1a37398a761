"""Tests for SQLAlchemy repositories."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from readytrack.domain.errors import DuplicateRecordError
from readytrack.domain.model import (
    AccessRecord,
    CombinedRecord,
    DataType,
    ImportBatch,
    PackagingRecord,
    SourceType,
)
from readytrack.domain.query import build_criterion

if TYPE_CHECKING:
    from readytrack.domain.ports import UnitOfWorkFactory

STAMP = datetime(2026, 10, 18, 9, 0, tzinfo=UTC)
ALL_KEYS = [("G1", "u1"), ("G1", "u2"), ("G2", "u1"), ("G2", "u3")]


def _access(group: str, account: str, application: str = "AppA", **extra: str) -> AccessRecord:
    return AccessRecord(
        access_group=group,
        account=account,
        application_name=application,
        imported_at=STAMP,
        import_batch="Access_Import_20261018_090000_000000",
        **extra,
    )


@pytest.fixture
def seeded(write_uow: UnitOfWorkFactory) -> UnitOfWorkFactory:
    with write_uow() as uow:
        repository = uow.repositories.access
        repository.add(_access("G1", "u1", "AppA", criticality="High"))
        repository.add(_access("G1", "u2", "100% Cloud"))
        repository.add(_access("G2", "u1", "App_B"))
        repository.add(_access("G2", "u3", "N/A"))
        uow.commit()
    return write_uow


def test_get_by_key_matches_full_natural_key(seeded: UnitOfWorkFactory) -> None:
    with seeded() as uow:
        found = uow.repositories.access.get_by_key(("G2", "u1"))
        missing = uow.repositories.access.get_by_key(("G3", "u1"))

    assert found is not None
    assert found.application_name == "App_B"
    assert missing is None


def test_get_by_key_rejects_partial_key(seeded: UnitOfWorkFactory) -> None:
    with seeded() as uow, pytest.raises(ValueError, match="Expected key"):
        uow.repositories.access.get_by_key(("G1",))


def test_duplicate_insert_raises_and_keeps_session_usable(seeded: UnitOfWorkFactory) -> None:
    with seeded() as uow:
        repository = uow.repositories.access
        with pytest.raises(DuplicateRecordError) as excinfo:
            repository.add(_access("G1", "u1", "Other"))
        repository.add(_access("G3", "u9"))
        uow.commit()

    assert excinfo.value.natural_key == ("G1", "u1")
    with seeded() as uow:
        assert uow.repositories.access.count() == 5
        original = uow.repositories.access.get_by_key(("G1", "u1"))
    assert original is not None
    assert original.application_name == "AppA"


def test_list_page_orders_by_natural_key(seeded: UnitOfWorkFactory) -> None:
    with seeded() as uow:
        first = uow.repositories.access.list_page(limit=2)
        rest = uow.repositories.access.list_page(limit=10, offset=2)

    assert [record.natural_key for record in first] == [("G1", "u1"), ("G1", "u2")]
    assert [record.natural_key for record in rest] == [("G2", "u1"), ("G2", "u3")]


def test_application_names_skip_sentinel(seeded: UnitOfWorkFactory) -> None:
    with seeded() as uow:
        names = uow.repositories.access.application_names()

    assert names == ["100% Cloud", "AppA", "App_B"]


def test_has_application_case_handling(seeded: UnitOfWorkFactory) -> None:
    with seeded() as uow:
        repository = uow.repositories.access
        assert repository.has_application("AppA")
        assert not repository.has_application("appa")
        assert repository.has_application("appa", ignore_case=True)
        assert not repository.has_application("AppZ", ignore_case=True)


def test_latest_import_reports_newest_batch(write_uow: UnitOfWorkFactory) -> None:
    older = ImportBatch.for_source(SourceType.PACKAGING, STAMP)
    newer = ImportBatch.for_source(SourceType.PACKAGING, STAMP + timedelta(hours=1))
    with write_uow() as uow:
        assert uow.repositories.packaging.latest_import() is None
        for name, batch in (("AppA", newer), ("AppB", older)):
            uow.repositories.packaging.add(
                PackagingRecord(
                    application_name=name,
                    status="Ready",
                    imported_at=batch.imported_at,
                    import_batch=batch.label,
                )
            )
        uow.commit()

    with write_uow() as uow:
        latest = uow.repositories.packaging.latest_import()

    assert latest == newer


def test_clear_returns_removed_rows(seeded: UnitOfWorkFactory) -> None:
    with seeded() as uow:
        removed = uow.repositories.access.clear()
        uow.commit()

    assert removed == 4
    with seeded() as uow:
        assert uow.repositories.access.count() == 0


@pytest.mark.parametrize(
    ("field", "operator", "value", "expected"),
    [
        ("Application Name", "contains", "%", [("G1", "u2")]),
        ("Application Name", "contains", "_", [("G2", "u1")]),
        ("Application Name", "starts-with", "App", [("G1", "u1"), ("G2", "u1")]),
        ("Application Name", "ends-with", "B", [("G2", "u1")]),
        ("Application Name", "not-contains", "App", [("G1", "u2"), ("G2", "u3")]),
        ("Criticality", "equals", "High", [("G1", "u1")]),
        ("Criticality", "not-equals", "High", [("G1", "u2"), ("G2", "u1"), ("G2", "u3")]),
        ("Account", "is-not-empty", None, ALL_KEYS),
    ],
)
def test_find_translates_operators(  # noqa: PLR0913
    seeded: UnitOfWorkFactory,
    field: str,
    operator: str,
    value: str | None,
    expected: list[tuple[str, str]],
) -> None:
    criterion = build_criterion(DataType.ACCESS, field, operator, value)

    with seeded() as uow:
        rows = uow.repositories.access.find(criterion, limit=10)

    assert [row.natural_key for row in rows] == expected


def test_update_matching_patches_combined_rows(write_uow: UnitOfWorkFactory) -> None:
    with write_uow() as uow:
        uow.repositories.combined.add_all(
            CombinedRecord(
                access_group="G1",
                account=account,
                application_name="AppA",
                imported_at=STAMP,
                import_batch="Combined_20261018_090000_000000",
            )
            for account in ("u1", "u2")
        )
        updated = uow.repositories.combined.update_matching(
            "application_name", "AppA", {"package_status": "Ready"}
        )
        untouched = uow.repositories.combined.update_matching("application_name", "AppZ", {})
        rows = uow.repositories.combined.list_all()
        uow.commit()

    assert (updated, untouched) == (2, 0)
    assert {row.package_status for row in rows} == {"Ready"}


def test_update_row_targets_one_combined_key(write_uow: UnitOfWorkFactory) -> None:
    with write_uow() as uow:
        uow.repositories.combined.add_all(
            CombinedRecord(
                access_group="G1",
                account=account,
                application_name="AppA",
                imported_at=STAMP,
                import_batch="Combined_20261018_090000_000000",
            )
            for account in ("u1", "u2")
        )
        updated = uow.repositories.combined.update_row(("G1", "u2"), {"test_status": "Ready"})
        missing = uow.repositories.combined.update_row(("G9", "u2"), {"test_status": "Ready"})
        rows = {row.account: row.test_status for row in uow.repositories.combined.list_all()}
        uow.commit()

    assert (updated, missing) == (1, 0)
    assert rows == {"u1": None, "u2": "Ready"}
