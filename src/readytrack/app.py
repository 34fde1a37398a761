"""Application orchestration entry points.

Each service takes an explicitly constructed ``SqlAlchemyStore`` and opens the
unit of work it needs: write units for anything that changes a store,
read-only units for queries, reports and exports.
"""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from readytrack.adapters.sqlalchemy import SqlAlchemyStore
from readytrack.adapters.tabular import read_candidates, write_records
from readytrack.config import get_database_config, get_query_config
from readytrack.domain.derivation import derive_packaging_records, derive_testing_records
from readytrack.domain.editing import edit_combined_field
from readytrack.domain.importing import import_records
from readytrack.domain.maintenance import clear_store
from readytrack.domain.model import SourceType
from readytrack.domain.propagation import propagate_changes
from readytrack.domain.query import run_query
from readytrack.domain.rebuild import rebuild_combined
from readytrack.domain.reporting import (
    application_names,
    fetch_all,
    has_application,
    list_records,
    summarize_store,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from pathlib import Path

    from readytrack.adapters.tabular import ExportFormat, TabularReadResult
    from readytrack.config import Environment
    from readytrack.domain.derivation import DerivationResult
    from readytrack.domain.importing import ImportResult
    from readytrack.domain.model import (
        CombinedRecord,
        DataType,
        ImportCandidate,
        StoredRecord,
    )
    from readytrack.domain.rebuild import RebuildResult
    from readytrack.domain.reporting import StoreSummary


log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def open_store(
    *,
    environment: Environment | None = None,
    database_uri: str | None = None,
) -> SqlAlchemyStore:
    """Build and connect a store for ``environment`` (or an explicit URI)."""

    config = get_database_config(environment=environment)
    store = SqlAlchemyStore(config)
    store.connect(database_uri=database_uri or config.uri)
    return store


def import_source(
    store: SqlAlchemyStore,
    source: SourceType,
    candidates: Iterable[ImportCandidate],
    *,
    clock: Callable[[], datetime] = _utcnow,
) -> ImportResult:
    return import_records(
        source,
        candidates,
        unit_of_work_factory=store.unit_of_work_factory(f"import_{source.value}"),
        clock=clock,
    )


def import_file(
    store: SqlAlchemyStore,
    source: SourceType,
    path: Path,
) -> tuple[ImportResult, TabularReadResult]:
    """Read a CSV export and import its well-formed rows."""

    parsed = read_candidates(path, source)
    return import_source(store, source, parsed.candidates), parsed


def rebuild(store: SqlAlchemyStore) -> RebuildResult:
    return rebuild_combined(unit_of_work_factory=store.unit_of_work_factory("rebuild"))


def propagate(
    store: SqlAlchemyStore,
    source: SourceType,
    natural_key: str,
    changed_fields: Mapping[str, object],
) -> int:
    return propagate_changes(
        source,
        natural_key,
        changed_fields,
        unit_of_work_factory=store.unit_of_work_factory(f"propagate_{source.value}"),
    )


def query(
    store: SqlAlchemyStore,
    data_type: DataType,
    field_label: str,
    operator: str,
    value: str | None = None,
    *,
    limit: int | None = None,
) -> list[StoredRecord]:
    return run_query(
        data_type,
        field_label,
        operator,
        value,
        unit_of_work_factory=store.unit_of_work_factory("query", read_only=True),
        config=get_query_config(),
        limit=limit,
    )


def clear(store: SqlAlchemyStore, data_type: DataType) -> int:
    return clear_store(
        data_type,
        unit_of_work_factory=store.unit_of_work_factory(f"clear_{data_type.value}"),
    )


def browse(
    store: SqlAlchemyStore,
    data_type: DataType,
    *,
    limit: int,
    offset: int = 0,
) -> list[StoredRecord]:
    return list_records(
        data_type,
        unit_of_work_factory=store.unit_of_work_factory("browse", read_only=True),
        limit=limit,
        offset=offset,
    )


def summarize(store: SqlAlchemyStore) -> StoreSummary:
    return summarize_store(unit_of_work_factory=store.unit_of_work_factory("status", read_only=True))


def list_applications(store: SqlAlchemyStore) -> list[str]:
    return application_names(
        unit_of_work_factory=store.unit_of_work_factory("applications", read_only=True)
    )


def application_known(store: SqlAlchemyStore, name: str) -> bool:
    return has_application(
        name,
        unit_of_work_factory=store.unit_of_work_factory("applications", read_only=True),
    )


def edit_combined(
    store: SqlAlchemyStore,
    access_group: str,
    account: str,
    field_label: str,
    value: str | None,
) -> CombinedRecord:
    return edit_combined_field(
        access_group,
        account,
        field_label,
        value,
        unit_of_work_factory=store.unit_of_work_factory("edit_Combined"),
        date_format=get_query_config().date_format,
    )


def derive(
    store: SqlAlchemyStore,
    source: SourceType,
    *,
    clock: Callable[[], datetime] = _utcnow,
) -> DerivationResult:
    """Regenerate the packaging or testing store from the combined view."""

    factory = store.unit_of_work_factory(f"derive_{source.value}")
    if source is SourceType.PACKAGING:
        return derive_packaging_records(unit_of_work_factory=factory, clock=clock)
    if source is SourceType.TESTING:
        return derive_testing_records(unit_of_work_factory=factory, clock=clock)
    raise ValueError(f"{source.value} records cannot be derived from the combined view")


def export(
    store: SqlAlchemyStore,
    data_type: DataType,
    path: Path,
    *,
    export_format: ExportFormat | None = None,
) -> int:
    records = fetch_all(
        data_type,
        unit_of_work_factory=store.unit_of_work_factory("export", read_only=True),
    )
    return write_records(records, data_type, path, export_format=export_format)
