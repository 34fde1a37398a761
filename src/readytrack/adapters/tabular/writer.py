"""Write stored records to CSV or JSON files.

CSV headers are the same human column labels the reader accepts, and dates are
written in ISO format, so a CSV export of a source store can be re-imported.
JSON exports keep the attribute names.
"""

from __future__ import annotations

import csv
import json
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Final

from readytrack.domain.query import field_registry

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from readytrack.domain.model import DataType, StoredRecord

log = getLogger(__name__)

PROVENANCE_COLUMNS: Final[tuple[tuple[str, str], ...]] = (
    ("Import Date", "imported_at"),
    ("Import Batch", "import_batch"),
)


class ExportFormat(StrEnum):
    CSV = "csv"
    JSON = "json"

    @classmethod
    def for_path(cls, path: Path) -> ExportFormat:
        suffix = path.suffix.lstrip(".").lower()
        try:
            return cls(suffix)
        except ValueError as exc:
            raise ValueError(f"Cannot infer export format from {path.name!r}") from exc


def export_columns(data_type: DataType) -> list[tuple[str, str]]:
    """``(label, attribute)`` pairs in display order, provenance last."""

    provenance = {attribute for _, attribute in PROVENANCE_COLUMNS}
    columns = [
        (spec.label, spec.attribute)
        for spec in field_registry(data_type).fields
        if spec.attribute not in provenance
    ]
    return [*columns, *PROVENANCE_COLUMNS]


def _cell(value: object) -> str | None:
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()  # pyright: ignore[reportAttributeAccessIssue]
    return str(value)


def write_csv(records: Sequence[StoredRecord], data_type: DataType, path: Path) -> int:
    columns = export_columns(data_type)
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(
            handle,
            fieldnames=[label for label, _ in columns],
            lineterminator="\n",
            quoting=csv.QUOTE_ALL,
        )
        writer.writeheader()
        for record in records:
            writer.writerow(
                {label: _cell(getattr(record, attribute)) or "" for label, attribute in columns}
            )
    return len(records)


def write_json(records: Sequence[StoredRecord], data_type: DataType, path: Path) -> int:
    columns = export_columns(data_type)
    payload = [
        {attribute: _cell(getattr(record, attribute)) for _, attribute in columns}
        for record in records
    ]
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)
        handle.write("\n")
    return len(records)


def write_records(
    records: Sequence[StoredRecord],
    data_type: DataType,
    path: Path,
    *,
    export_format: ExportFormat | None = None,
) -> int:
    """Write ``records`` to ``path``; the format defaults to the file suffix."""

    resolved = export_format or ExportFormat.for_path(path)
    if resolved is ExportFormat.CSV:
        written = write_csv(records, data_type, path)
    else:
        written = write_json(records, data_type, path)
    log.info(
        "Export finished operation=export data_type=%s format=%s rows=%s path=%s",
        data_type.value,
        resolved.value,
        written,
        path,
    )
    return written
