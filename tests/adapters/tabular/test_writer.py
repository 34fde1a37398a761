from __future__ import annotations

import csv
import json
from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from readytrack.adapters.tabular import ExportFormat, export_columns, read_candidates, write_records
from readytrack.domain.model import (
    CombinedRecord,
    DataType,
    PackagingCandidate,
    PackagingRecord,
    SourceType,
)

STAMP = datetime(2026, 10, 18, 9, 0, tzinfo=UTC)
BATCH = "Combined_20261018_090000_000000"


def _combined() -> list[CombinedRecord]:
    return [
        CombinedRecord(
            access_group="G1",
            account="u1",
            application_name="AppA",
            department="Finance, Tax",
            package_status='Ready "soon"',
            package_readiness_date=date(2026, 11, 1),
            imported_at=STAMP,
            import_batch=BATCH,
        ),
        CombinedRecord(
            access_group="G1",
            account="u2",
            imported_at=STAMP,
            import_batch=BATCH,
        ),
    ]


def test_export_columns_put_provenance_last() -> None:
    columns = export_columns(DataType.COMBINED)

    assert columns[:2] == [("Access Group", "access_group"), ("Account", "account")]
    assert columns[-2:] == [("Import Date", "imported_at"), ("Import Batch", "import_batch")]
    assert [attribute for _, attribute in columns].count("import_batch") == 1


def test_write_combined_csv(tmp_path: Path) -> None:
    path = tmp_path / "combined_export.csv"

    written = write_records(_combined(), DataType.COMBINED, path)

    assert written == 2
    with path.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert rows[0]["Department"] == "Finance, Tax"
    assert rows[0]["Package Status"] == 'Ready "soon"'
    assert rows[0]["Package Readiness Date"] == "2026-11-01"
    assert rows[0]["Import Date"] == "2026-10-18T09:00:00+00:00"
    assert rows[1]["Department"] == ""
    assert rows[1]["Application Name"] == "N/A"


def test_write_combined_json(tmp_path: Path) -> None:
    path = tmp_path / "combined.out"

    write_records(_combined(), DataType.COMBINED, path, export_format=ExportFormat.JSON)

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert [row["account"] for row in payload] == ["u1", "u2"]
    assert payload[0]["package_readiness_date"] == "2026-11-01"
    assert payload[0]["import_batch"] == BATCH
    assert payload[1]["department"] is None


def test_source_csv_export_can_be_reimported(tmp_path: Path) -> None:
    path = tmp_path / "packaging.csv"
    records = [
        PackagingRecord(
            application_name="AppA",
            status="Ready",
            readiness_date=date(2026, 11, 1),
            imported_at=STAMP,
            import_batch="Packaging_Import_20261018_090000_000000",
        ),
        PackagingRecord(
            application_name="AppB",
            status="Planned",
            imported_at=STAMP,
            import_batch="Packaging_Import_20261018_090000_000000",
        ),
    ]

    write_records(records, DataType.PACKAGING, path)
    result = read_candidates(path, SourceType.PACKAGING)

    assert result.rejected == []
    assert result.candidates == [
        PackagingCandidate("AppA", "Ready", date(2026, 11, 1)),
        PackagingCandidate("AppB", "Planned"),
    ]


def test_export_format_follows_suffix() -> None:
    assert ExportFormat.for_path(Path("out/Combined.JSON")) is ExportFormat.JSON
    with pytest.raises(ValueError, match="Cannot infer export format"):
        ExportFormat.for_path(Path("combined.xlsx"))
