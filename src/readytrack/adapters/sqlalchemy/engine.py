"""Engine construction with SQLite transaction handling.

pysqlite's own BEGIN handling is switched off so that SAVEPOINT works and so
each unit of work can choose its BEGIN mode: writers take ``BEGIN IMMEDIATE``
(at most one writer), readers ``BEGIN DEFERRED`` (many concurrent readers under
WAL journaling).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final

from sqlalchemy import create_engine, event

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

log = logging.getLogger(__name__)

BEGIN_MODE_OPTION: Final[str] = "readytrack_begin_mode"
BUSY_TIMEOUT_MS: Final[int] = 5000


def _is_memory_database(engine: Engine) -> bool:
    return engine.url.database in (None, "", ":memory:")


def install_sqlite_transaction_hooks(engine: Engine) -> Engine:
    """Attach the connect/begin listeners; a no-op for other backends."""

    if engine.dialect.name != "sqlite":
        return engine
    use_wal = not _is_memory_database(engine)

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, _connection_record: object) -> None:  # pyright: ignore[reportUnusedFunction]
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            if use_wal:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
        finally:
            cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(connection: Connection) -> None:  # pyright: ignore[reportUnusedFunction]
        mode = connection.get_execution_options().get(BEGIN_MODE_OPTION, "DEFERRED")
        connection.exec_driver_sql(f"BEGIN {mode}")

    return engine


def create_store_engine(database_uri: str) -> Engine:
    log.info("Creating engine for %s", database_uri)
    return install_sqlite_transaction_hooks(create_engine(database_uri, future=True))


def writer_engine(engine: Engine) -> Engine:
    """Same pool and listeners, but transactions start with ``BEGIN IMMEDIATE``."""
    if engine.dialect.name != "sqlite":
        return engine
    return engine.execution_options(**{BEGIN_MODE_OPTION: "IMMEDIATE"})
