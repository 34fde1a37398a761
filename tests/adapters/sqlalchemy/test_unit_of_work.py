from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import text

from readytrack.adapters.sqlalchemy import SqlAlchemyStore
from readytrack.adapters.sqlalchemy.unit_of_work import UnitOfWorkStateError
from readytrack.config import DatabaseConfig, Environment
from readytrack.domain.errors import StoreUnavailableError, TransactionFailureError
from readytrack.domain.importing import import_records
from readytrack.domain.model import AccessRecord, SourceType
from tests.helpers.records import access

if TYPE_CHECKING:
    from pathlib import Path

    from readytrack.domain.ports import UnitOfWorkFactory
    from tests.helpers.records import SteppingClock


def test_unit_of_work_requires_connected_store() -> None:
    store = SqlAlchemyStore(DatabaseConfig(uri="sqlite+pysqlite:///:memory:"))

    with pytest.raises(StoreUnavailableError) as excinfo:
        store.unit_of_work("query")

    assert excinfo.value.operation == "query"
    assert store.is_connected is False


def test_connect_twice_is_rejected(store: SqlAlchemyStore) -> None:
    with pytest.raises(RuntimeError, match="already connected"):
        store.connect(database_uri="sqlite+pysqlite:///:memory:")


def test_exception_rolls_back_everything(
    write_uow: UnitOfWorkFactory, clock: SteppingClock
) -> None:
    import_records(
        SourceType.ACCESS,
        [access("G1", "u1")],
        unit_of_work_factory=write_uow,
        clock=clock,
    )

    with pytest.raises(RuntimeError, match="boom"), write_uow() as uow:
        uow.repositories.access.clear()
        raise RuntimeError("boom")

    with write_uow() as uow:
        assert uow.repositories.access.count() == 1


def test_uncommitted_work_is_discarded(write_uow: UnitOfWorkFactory) -> None:
    with write_uow() as uow:
        uow.repositories.access.add(
            AccessRecord(
                access_group="G1",
                account="u1",
                imported_at=datetime(2026, 10, 18, tzinfo=UTC),
                import_batch="Access_Import_uncommitted",
            )
        )
        assert uow.repositories.access.count() == 1

    with write_uow() as uow:
        assert uow.repositories.access.count() == 0


def test_store_errors_become_transaction_failures(store: SqlAlchemyStore) -> None:
    with (
        pytest.raises(TransactionFailureError) as excinfo,
        store.unit_of_work("import_Access") as uow,
    ):
        uow.session.execute(text("SELECT * FROM missing_table"))

    assert excinfo.value.operation == "import_Access"
    assert "OperationalError" in str(excinfo.value)


def test_read_only_unit_cannot_commit(read_uow: UnitOfWorkFactory) -> None:
    with pytest.raises(UnitOfWorkStateError), read_uow() as uow:
        uow.commit()


def test_repositories_require_an_open_unit(store: SqlAlchemyStore) -> None:
    uow = store.unit_of_work("idle")

    with pytest.raises(UnitOfWorkStateError):
        _ = uow.repositories


def test_reconnect_switches_database(
    store: SqlAlchemyStore, tmp_path: Path, clock: SteppingClock
) -> None:
    factory = store.unit_of_work_factory("seed")
    import_records(
        SourceType.ACCESS, [access("G1", "u1")], unit_of_work_factory=factory, clock=clock
    )

    uri = f"sqlite+pysqlite:///{tmp_path / 'acceptance.db'}"
    store.reconnect(environment=Environment.ACCEPTANCE, database_uri=uri)

    assert store.environment is Environment.ACCEPTANCE
    assert (tmp_path / "acceptance.db").exists()
    with store.unit_of_work("count", read_only=True) as uow:
        assert uow.repositories.access.count() == 0


def test_dispose_makes_store_unavailable(store: SqlAlchemyStore) -> None:
    store.dispose()

    assert store.is_connected is False
    with pytest.raises(StoreUnavailableError):
        store.unit_of_work("after_dispose")
