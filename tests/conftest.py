from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from readytrack.adapters.sqlalchemy import SqlAlchemyStore, create_store_engine, start_mappers
from readytrack.adapters.sqlalchemy.migrations import upgrade_head
from readytrack.config import DatabaseConfig, Environment
from tests.helpers.records import SteppingClock

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from readytrack.adapters.sqlalchemy import SqlAlchemyUnitOfWork

MEMORY_URI = "sqlite+pysqlite:///:memory:"


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_store_engine(MEMORY_URI)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(sqlite_engine: Engine) -> Iterator[SqlAlchemyStore]:
    connected = SqlAlchemyStore(DatabaseConfig(uri=MEMORY_URI, environment=Environment.TEST))
    connected.connect(engine=sqlite_engine)
    try:
        yield connected
    finally:
        connected.dispose()


@pytest.fixture
def write_uow(store: SqlAlchemyStore) -> Callable[[], SqlAlchemyUnitOfWork]:
    return store.unit_of_work_factory("test_write")


@pytest.fixture
def read_uow(store: SqlAlchemyStore) -> Callable[[], SqlAlchemyUnitOfWork]:
    return store.unit_of_work_factory("test_read", read_only=True)


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()
