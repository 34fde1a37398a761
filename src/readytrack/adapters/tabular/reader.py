"""Read CSV exports into import candidates.

Rows that fail syntactic validation are reported back, not imported; the
importer only ever sees well-formed candidates.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .translator import ROW_MODELS, translate_row

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from readytrack.domain.model import ImportCandidate, SourceType

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RejectedRow:
    line: int
    message: str


@dataclass(slots=True)
class TabularReadResult:
    source: SourceType
    candidates: list[ImportCandidate] = field(default_factory=list["ImportCandidate"])
    rejected: list[RejectedRow] = field(default_factory=list[RejectedRow])


def _sniff_delimiter(sample: str) -> str:
    try:
        return csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
    except csv.Error:
        return ","


def parse_rows(
    source: SourceType,
    rows: Iterable[dict[str, str]],
    *,
    first_line: int = 2,
) -> TabularReadResult:
    """Validate header-keyed rows; ``first_line`` is the file line of the first row."""

    model = ROW_MODELS[source]
    result = TabularReadResult(source=source)
    for line, raw in enumerate(rows, start=first_line):
        cleaned = {key.strip(): value for key, value in raw.items() if key is not None}
        if not any((value or "").strip() for value in cleaned.values()):
            continue
        try:
            row = model.model_validate(cleaned)
        except ValidationError as exc:
            errors = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            result.rejected.append(RejectedRow(line=line, message=errors))
            continue
        result.candidates.append(translate_row(row))
    return result


def read_candidates(path: Path, source: SourceType) -> TabularReadResult:
    """Parse a CSV export for ``source``; the header row carries the column labels."""

    with path.open(encoding="utf-8-sig", newline="") as handle:
        sample = handle.read(4096)
        handle.seek(0)
        reader = csv.DictReader(handle, delimiter=_sniff_delimiter(sample))
        result = parse_rows(source, reader)

    log.info(
        "Read %s: source=%s candidates=%s rejected=%s",
        path.name,
        source.value,
        len(result.candidates),
        len(result.rejected),
    )
    for rejected in result.rejected:
        log.warning("Rejected %s line %s: %s", path.name, rejected.line, rejected.message)
    return result
