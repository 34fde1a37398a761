"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.exc import IntegrityError

from readytrack.adapters.sqlalchemy.mappings import (
    access_record_table,
    cluster_record_table,
    combined_record_table,
    employment_record_table,
    migration_plan_record_table,
    packaging_record_table,
    testing_record_table,
)
from readytrack.adapters.sqlalchemy.query import criterion_clause
from readytrack.domain.errors import DuplicateRecordError
from readytrack.domain.model import (
    NOT_AVAILABLE,
    AccessRecord,
    ClusterRecord,
    CombinedRecord,
    EmploymentRecord,
    ImportBatch,
    MigrationPlanRecord,
    PackagingRecord,
    StoredRecord,
    TestingRecord,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sqlalchemy import ColumnElement, CursorResult, Table
    from sqlalchemy.orm import Session

    from readytrack.domain.query import QueryCriterion


class SqlAlchemyRecordRepository[TRecord: StoredRecord]:
    """Shared helpers for stores keyed by a natural key."""

    def __init__(self, session: Session, record_type: type[TRecord], table: Table) -> None:
        self.session = session
        self._record_type = record_type
        self._table = table

    def add(self, record: TRecord) -> None:
        """Insert inside a savepoint so a key collision only loses this record."""

        try:
            with self.session.begin_nested():
                self.session.add(record)
        except IntegrityError as exc:
            raise DuplicateRecordError(record.natural_key) from exc

    def get_by_key(self, key: tuple[str, ...]) -> TRecord | None:
        stmt = select(self._record_type).where(*self._key_clauses(key)).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_all(self) -> list[TRecord]:
        stmt = select(self._record_type).order_by(*self._key_columns())
        return list(self.session.execute(stmt).scalars())

    def list_page(self, *, limit: int, offset: int = 0) -> list[TRecord]:
        stmt = select(self._record_type).order_by(*self._key_columns()).limit(limit).offset(offset)
        return list(self.session.execute(stmt).scalars())

    def find(self, criterion: QueryCriterion, *, limit: int) -> list[TRecord]:
        stmt = (
            select(self._record_type)
            .where(criterion_clause(self._table, criterion))
            .order_by(*self._key_columns())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def count(self) -> int:
        self.session.flush()
        stmt = select(func.count()).select_from(self._table)
        return self.session.execute(stmt).scalar_one()

    def clear(self) -> int:
        result = cast("CursorResult[object]", self.session.execute(delete(self._record_type)))
        return result.rowcount

    def latest_import(self) -> ImportBatch | None:
        stmt = (
            select(self._table.c.import_batch, self._table.c.imported_at)
            .order_by(self._table.c.imported_at.desc(), self._table.c.import_batch.desc())
            .limit(1)
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        return ImportBatch(label=row.import_batch, imported_at=row.imported_at)

    def _key_columns(self) -> list[ColumnElement[object]]:
        return [self._table.c[name] for name in self._record_type.KEY_FIELDS]

    def _key_clauses(self, key: tuple[str, ...]) -> list[ColumnElement[bool]]:
        names = self._record_type.KEY_FIELDS
        if len(key) != len(names):
            raise ValueError(f"Expected key of {names}, got {key!r}")
        return [self._table.c[name] == value for name, value in zip(names, key, strict=True)]


class SqlAlchemyAccessRepository(SqlAlchemyRecordRepository[AccessRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, AccessRecord, access_record_table)

    def application_names(self) -> list[str]:
        column = access_record_table.c.application_name
        stmt = select(column).where(column != NOT_AVAILABLE).distinct().order_by(column)
        return list(self.session.execute(stmt).scalars())

    def has_application(self, name: str, *, ignore_case: bool = False) -> bool:
        column = access_record_table.c.application_name
        condition = func.lower(column) == name.lower() if ignore_case else column == name
        return bool(self.session.execute(select(exists().where(condition))).scalar())


class SqlAlchemyEmploymentRepository(SqlAlchemyRecordRepository[EmploymentRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, EmploymentRecord, employment_record_table)

    def departments(self) -> set[str]:
        column = employment_record_table.c.department
        stmt = select(column).where(column.is_not(None)).distinct()
        return set(self.session.execute(stmt).scalars())


class SqlAlchemyPackagingRepository(SqlAlchemyRecordRepository[PackagingRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, PackagingRecord, packaging_record_table)


class SqlAlchemyTestingRepository(SqlAlchemyRecordRepository[TestingRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, TestingRecord, testing_record_table)


class SqlAlchemyMigrationPlanRepository(SqlAlchemyRecordRepository[MigrationPlanRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, MigrationPlanRecord, migration_plan_record_table)


class SqlAlchemyClusterRepository(SqlAlchemyRecordRepository[ClusterRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, ClusterRecord, cluster_record_table)


class SqlAlchemyCombinedRecordRepository(SqlAlchemyRecordRepository[CombinedRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, CombinedRecord, combined_record_table)

    def add_all(self, records: Iterable[CombinedRecord]) -> None:
        self.session.add_all(records)
        self.session.flush()

    def update_matching(self, field: str, value: str, changes: Mapping[str, object]) -> int:
        if not changes:
            return 0
        stmt = (
            update(CombinedRecord)
            .where(combined_record_table.c[field] == value)
            .values(dict(changes))
            .execution_options(synchronize_session="fetch")
        )
        result = cast("CursorResult[object]", self.session.execute(stmt))
        return result.rowcount

    def update_row(self, key: tuple[str, ...], changes: Mapping[str, object]) -> int:
        if not changes:
            return 0
        stmt = (
            update(CombinedRecord)
            .where(*self._key_clauses(key))
            .values(dict(changes))
            .execution_options(synchronize_session="fetch")
        )
        result = cast("CursorResult[object]", self.session.execute(stmt))
        return result.rowcount
