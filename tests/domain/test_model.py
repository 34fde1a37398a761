from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from readytrack.domain.model import (
    RECORD_TYPES,
    DataType,
    ImportBatch,
    PackagingRecord,
    ReadinessLabel,
    SourceType,
)

STAMP = datetime(2026, 10, 18, 14, 25, 1, 123, tzinfo=UTC)


def test_source_batch_label_has_microsecond_timestamp() -> None:
    batch = ImportBatch.for_source(SourceType.PACKAGING, STAMP)

    assert batch.label == "Packaging_Import_20261018_142501_000123"
    assert batch.imported_at == STAMP


def test_rebuild_batch_label_is_prefixed_combined() -> None:
    assert ImportBatch.for_rebuild(STAMP).label == "Combined_20261018_142501_000123"


def test_batch_timestamps_are_normalized_to_utc() -> None:
    local = STAMP.astimezone(timezone(timedelta(hours=2)))
    naive = STAMP.replace(tzinfo=None)

    assert ImportBatch.for_source(SourceType.ACCESS, local).imported_at == STAMP
    assert ImportBatch.for_source(SourceType.ACCESS, naive).imported_at == STAMP


def test_batch_labels_sort_in_creation_order() -> None:
    labels = [
        ImportBatch.for_source(SourceType.TESTING, STAMP + timedelta(microseconds=step)).label
        for step in (0, 1, 999_999)
    ]

    assert labels == sorted(labels)


@pytest.mark.parametrize("raw", ["migration-plan", "Migration Plan", "MIGRATION_PLAN"])
def test_source_type_parse_accepts_spellings(raw: str) -> None:
    assert SourceType.parse(raw) is SourceType.MIGRATION_PLAN


def test_data_type_parse_includes_combined() -> None:
    assert DataType.parse("combined") is DataType.COMBINED
    assert DataType.COMBINED.source is None
    assert DataType.CLUSTER.source is SourceType.CLUSTER
    with pytest.raises(ValueError, match="Unknown data type"):
        DataType.parse("payroll")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("on hold", ReadinessLabel.ON_HOLD),
        ("AFTERCARE   ok", ReadinessLabel.AFTERCARE_OK),
        ("Orderlist to Dep", ReadinessLabel.ORDERLIST_TO_DEP),
        ("Almost there", None),
    ],
)
def test_readiness_label_match(raw: str, expected: ReadinessLabel | None) -> None:
    assert ReadinessLabel.match(raw) is expected


def test_every_data_type_has_a_record_type() -> None:
    assert set(RECORD_TYPES) == set(DataType)
    assert RECORD_TYPES[DataType.PACKAGING] is PackagingRecord


def test_replace_fields_keeps_identity_and_key() -> None:
    record = PackagingRecord(
        application_name="AppA",
        status="Draft",
        imported_at=STAMP,
        import_batch="Packaging_Import_old",
    )
    identity = record.id
    batch = ImportBatch.for_source(SourceType.PACKAGING, STAMP + timedelta(days=1))

    record.replace_fields({"application_name": "AppB", "status": "Ready"}, batch)

    assert record.id == identity
    assert record.natural_key == ("AppA",)
    assert record.status == "Ready"
    assert record.readiness_date is None
    assert record.import_batch == batch.label
