"""SQLAlchemy-backed store handle and units of work.

``SqlAlchemyStore`` is constructed explicitly and handed to whoever needs it;
switching environments is an explicit ``reconnect`` call. Units of work are
only available while the store is connected.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import partial
from typing import TYPE_CHECKING, Literal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from readytrack.adapters.sqlalchemy.engine import create_store_engine, writer_engine
from readytrack.adapters.sqlalchemy.mappings import start_mappers
from readytrack.adapters.sqlalchemy.migrations import upgrade_head
from readytrack.adapters.sqlalchemy.repositories import (
    SqlAlchemyAccessRepository,
    SqlAlchemyClusterRepository,
    SqlAlchemyCombinedRecordRepository,
    SqlAlchemyEmploymentRepository,
    SqlAlchemyMigrationPlanRepository,
    SqlAlchemyPackagingRepository,
    SqlAlchemyTestingRepository,
)
from readytrack.config import DatabaseConfig, Environment, get_database_config
from readytrack.domain.errors import StoreUnavailableError, TransactionFailureError
from readytrack.domain.ports import RepositoryCollection, StoreRepositories

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UnitOfWorkStateError(RuntimeError):
    """Raised when a unit of work is used outside its ``with`` block."""


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections.

    Any SQLAlchemy error escaping the block rolls the transaction back and is
    re-raised as ``TransactionFailureError`` naming the operation.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        operation: str,
        read_only: bool = False,
    ) -> None:
        self.session_factory = session_factory
        self.operation = operation
        self.read_only = read_only
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            if exc_type is not None:
                self.rollback()
        finally:
            self.session.close()
            self.session = None
        if isinstance(exc_value, SQLAlchemyError):
            log.error("Transaction failed operation=%s error=%s", self.operation, exc_value)
            raise TransactionFailureError(self.operation, type(exc_value).__name__) from exc_value
        return False

    def commit(self) -> None:
        if self.read_only:
            raise UnitOfWorkStateError(f"Read-only unit of work cannot commit ({self.operation})")
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise UnitOfWorkStateError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise UnitOfWorkStateError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise UnitOfWorkStateError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyUnitOfWork(BaseSqlAlchemyUnitOfWork[StoreRepositories]):
    """Unit of work over every readytrack store."""

    def _build_repositories(self, session: Session) -> StoreRepositories:
        return StoreRepositories(
            access=SqlAlchemyAccessRepository(session),
            employment=SqlAlchemyEmploymentRepository(session),
            packaging=SqlAlchemyPackagingRepository(session),
            testing=SqlAlchemyTestingRepository(session),
            migration_plans=SqlAlchemyMigrationPlanRepository(session),
            clusters=SqlAlchemyClusterRepository(session),
            combined=SqlAlchemyCombinedRecordRepository(session),
        )


class SqlAlchemyStore:
    """Holds the active engine and hands out units of work against it."""

    def __init__(self, database_config: DatabaseConfig | None = None) -> None:
        self._config = database_config
        self._engine: Engine | None = None
        self._write_sessions: sessionmaker[Session] | None = None
        self._read_sessions: sessionmaker[Session] | None = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @property
    def environment(self) -> Environment | None:
        return self._config.environment if self._config else None

    def connect(self, *, engine: Engine | None = None, database_uri: str | None = None) -> None:
        """Open the engine, configure mappers and migrate the schema to head.

        A supplied ``engine`` should come from ``create_store_engine`` so SQLite
        transactions get their BEGIN handling.
        """

        if self._engine is not None:
            raise RuntimeError("Store already connected; call reconnect() to switch databases")

        if engine is None:
            if database_uri is None:
                self._config = self._config or get_database_config()
                database_uri = self._config.uri
            engine = create_store_engine(database_uri)

        start_mappers()
        upgrade_head(engine=engine)

        self._engine = engine
        self._write_sessions = sessionmaker(bind=writer_engine(engine), expire_on_commit=False)
        self._read_sessions = sessionmaker(bind=engine, expire_on_commit=False)
        log.info(
            "Store connected url=%s environment=%s",
            engine.url.render_as_string(hide_password=True),
            self.environment,
        )

    def reconnect(
        self,
        *,
        environment: Environment | None = None,
        database_uri: str | None = None,
    ) -> None:
        """Dispose the current engine and connect to another environment or URI."""

        if database_uri is not None:
            current = self._config.environment if self._config else Environment.DEVELOPMENT
            self._config = DatabaseConfig(uri=database_uri, environment=environment or current)
        else:
            self._config = get_database_config(environment=environment)
        self.dispose()
        self.connect(database_uri=self._config.uri)

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            log.info("Store disconnected")
        self._engine = None
        self._write_sessions = None
        self._read_sessions = None

    def unit_of_work(
        self,
        operation: str = "unit_of_work",
        *,
        read_only: bool = False,
    ) -> SqlAlchemyUnitOfWork:
        factory = self._read_sessions if read_only else self._write_sessions
        if factory is None:
            raise StoreUnavailableError(operation)
        return SqlAlchemyUnitOfWork(factory, operation=operation, read_only=read_only)

    def unit_of_work_factory(
        self,
        operation: str,
        *,
        read_only: bool = False,
    ) -> Callable[[], SqlAlchemyUnitOfWork]:
        return partial(self.unit_of_work, operation, read_only=read_only)


if TYPE_CHECKING:
    from readytrack.domain.ports import StoreUnitOfWork

    _uow_check: StoreUnitOfWork = SqlAlchemyUnitOfWork(sessionmaker(), operation="check")
