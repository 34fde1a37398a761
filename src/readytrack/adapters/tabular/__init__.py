"""Tabular adapter: CSV exports in, CSV or JSON exports out."""

from __future__ import annotations

from .reader import RejectedRow, TabularReadResult, parse_rows, read_candidates
from .schema import (
    AccessRow,
    ClusterRow,
    EmploymentRow,
    MigrationPlanRow,
    PackagingRow,
    TabularRow,
    TestingRow,
)
from .translator import ROW_MODELS, translate_row
from .writer import ExportFormat, export_columns, write_records

__all__ = [
    "ROW_MODELS",
    "AccessRow",
    "ClusterRow",
    "EmploymentRow",
    "ExportFormat",
    "MigrationPlanRow",
    "PackagingRow",
    "RejectedRow",
    "TabularReadResult",
    "TabularRow",
    "TestingRow",
    "export_columns",
    "parse_rows",
    "read_candidates",
    "translate_row",
    "write_records",
]
