"""Query engine: operator enumeration, per-store field registry, criteria.

A query is the tuple ``(data type, field label, operator, value)``. The domain
side resolves the label and operator and parses the value; adapters translate
the resulting ``QueryCriterion`` into a parameterized statement.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from readytrack.config import DISPLAY_DATE_FORMAT, MAX_QUERY_RESULTS, QueryConfig
from readytrack.domain.errors import (
    InvalidDateFormatError,
    InvalidOperatorError,
    MissingValueError,
    UnknownFieldError,
)
from readytrack.domain.model import DataType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from readytrack.domain.model import StoredRecord
    from readytrack.domain.ports import UnitOfWorkFactory

log = getLogger(__name__)


class Operator(StrEnum):
    EQUALS = "equals"
    NOT_EQUALS = "not-equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not-contains"
    STARTS_WITH = "starts-with"
    ENDS_WITH = "ends-with"
    IS_EMPTY = "is-empty"
    IS_NOT_EMPTY = "is-not-empty"
    BEFORE = "before"
    AFTER = "after"

    @classmethod
    def parse(cls, value: str) -> Operator:
        """Accept ``not equals``, ``Not_Equals`` and ``not-equals`` alike."""
        normalized = re.sub(r"[\s_]+", "-", value.strip().lower())
        try:
            return cls(normalized)
        except ValueError as exc:
            raise InvalidOperatorError(value) from exc

    @property
    def needs_value(self) -> bool:
        return self not in {Operator.IS_EMPTY, Operator.IS_NOT_EMPTY}


class FieldKind(StrEnum):
    TEXT = "text"
    DATE = "date"


TEXT_OPERATORS = frozenset(Operator) - {Operator.BEFORE, Operator.AFTER}
DATE_OPERATORS = frozenset(
    {
        Operator.EQUALS,
        Operator.NOT_EQUALS,
        Operator.BEFORE,
        Operator.AFTER,
        Operator.IS_EMPTY,
        Operator.IS_NOT_EMPTY,
    }
)


@dataclass(frozen=True, slots=True)
class FieldSpec:
    label: str
    attribute: str
    kind: FieldKind = FieldKind.TEXT

    @property
    def operators(self) -> frozenset[Operator]:
        return DATE_OPERATORS if self.kind is FieldKind.DATE else TEXT_OPERATORS


def _fold(label: str) -> str:
    return " ".join(label.split()).casefold()


def passthrough_attribute(label: str) -> str:
    """Unmapped labels become lowercase_with_underscores."""
    return re.sub(r"\s+", "_", label.strip().lower())


class FieldRegistry:
    """Fixed label → column lookup for one data type.

    Every field label, plus optional aliases, resolves case-insensitively.
    Unmapped labels pass through as ``lowercase_with_underscores`` and must
    then name a registered attribute.
    """

    def __init__(self, data_type: DataType, specs: Iterable[FieldSpec], aliases: Mapping[str, str]):
        self.data_type = data_type
        self._by_attribute: dict[str, FieldSpec] = {}
        self._by_label: dict[str, FieldSpec] = {}
        for spec in specs:
            self._by_attribute[spec.attribute] = spec
            self._by_label[_fold(spec.label)] = spec
        for alias, attribute in aliases.items():
            self._by_label[_fold(alias)] = self._by_attribute[attribute]

    @property
    def fields(self) -> tuple[FieldSpec, ...]:
        return tuple(self._by_attribute.values())

    def resolve(self, label: str) -> FieldSpec:
        spec = self._by_label.get(_fold(label))
        if spec is not None:
            return spec
        spec = self._by_attribute.get(passthrough_attribute(label))
        if spec is None:
            raise UnknownFieldError(label, self.data_type.value)
        return spec


def _text(label: str, attribute: str) -> FieldSpec:
    return FieldSpec(label, attribute, FieldKind.TEXT)


def _date(label: str, attribute: str) -> FieldSpec:
    return FieldSpec(label, attribute, FieldKind.DATE)


_ACCESS_FIELDS = (
    _text("Access Group", "access_group"),
    _text("Account", "account"),
    _text("Application Name", "application_name"),
    _text("Application Suite", "application_suite"),
    _text("Environment Tier", "environment_tier"),
    _text("Criticality", "criticality"),
)
_ACCESS_ALIASES = {
    "AD Group": "access_group",
    "System Account": "account",
    "OTAP": "environment_tier",
    "Critical": "criticality",
}
_EMPLOYMENT_FIELDS = (
    _text("Department", "department"),
    _text("Job Role", "job_role"),
    _text("Division", "division"),
    _date("Leave Date", "leave_date"),
)
_PROVENANCE_FIELDS = (_text("Import Batch", "import_batch"),)

_REGISTRIES: dict[DataType, FieldRegistry] = {
    DataType.ACCESS: FieldRegistry(
        DataType.ACCESS,
        (*_ACCESS_FIELDS, *_PROVENANCE_FIELDS),
        _ACCESS_ALIASES,
    ),
    DataType.EMPLOYMENT: FieldRegistry(
        DataType.EMPLOYMENT,
        (
            _text("Account", "account"),
            *_EMPLOYMENT_FIELDS,
            _text("Department Simple", "department_simple"),
            *_PROVENANCE_FIELDS,
        ),
        {"System Account": "account"},
    ),
    DataType.PACKAGING: FieldRegistry(
        DataType.PACKAGING,
        (
            _text("Application Name", "application_name"),
            _text("Package Status", "status"),
            _date("Package Readiness Date", "readiness_date"),
            *_PROVENANCE_FIELDS,
        ),
        {"Status": "status", "Readiness Date": "readiness_date"},
    ),
    DataType.TESTING: FieldRegistry(
        DataType.TESTING,
        (
            _text("Application Name", "application_name"),
            _text("Test Status", "status"),
            _text("Test Result", "result"),
            _date("Test Date", "test_date"),
            _date("Test Plan Date", "plan_date"),
            _text("Test Comments", "comments"),
            *_PROVENANCE_FIELDS,
        ),
        {
            "Status": "status",
            "Result": "result",
            "Plan Date": "plan_date",
            "Comments": "comments",
        },
    ),
    DataType.MIGRATION_PLAN: FieldRegistry(
        DataType.MIGRATION_PLAN,
        (
            _text("Application Name", "application_name"),
            _text("Application New", "application_new"),
            _text("Application Suite New", "suite_new"),
            _text("Will Be", "target_application"),
            _text("In/Out Scope Division", "scope_division"),
            _text("Migration Platform", "platform"),
            _text("Migration Application Readiness", "readiness"),
            *_PROVENANCE_FIELDS,
        ),
        {
            "Suite New": "suite_new",
            "Target Application": "target_application",
            "Scope Division": "scope_division",
            "Platform": "platform",
            "Readiness": "readiness",
        },
    ),
    DataType.CLUSTER: FieldRegistry(
        DataType.CLUSTER,
        (
            _text("Department", "department"),
            _text("Department Simple", "department_simple"),
            _text("Domain", "domain"),
            _text("Migration Cluster", "migration_cluster"),
            _text("Migration Cluster Readiness", "cluster_readiness"),
            *_PROVENANCE_FIELDS,
        ),
        {"Cluster Readiness": "cluster_readiness"},
    ),
    DataType.COMBINED: FieldRegistry(
        DataType.COMBINED,
        (
            *_ACCESS_FIELDS,
            *_EMPLOYMENT_FIELDS,
            _text("Package Status", "package_status"),
            _date("Package Readiness Date", "package_readiness_date"),
            _text("Test Status", "test_status"),
            _date("Test Date", "test_date"),
            _text("Test Result", "test_result"),
            _date("Test Plan Date", "test_plan_date"),
            _text("Test Comments", "test_comments"),
            _text("Application New", "application_new"),
            _text("Application Suite New", "suite_new"),
            _text("Will Be", "target_application"),
            _text("In/Out Scope Division", "scope_division"),
            _text("Migration Platform", "migration_platform"),
            _text("Migration Application Readiness", "migration_readiness"),
            _text("Department Simple", "department_simple"),
            _text("Domain", "domain"),
            _text("Migration Cluster", "migration_cluster"),
            _text("Migration Cluster Readiness", "cluster_readiness"),
            *_PROVENANCE_FIELDS,
        ),
        {
            **_ACCESS_ALIASES,
            "Target Application": "target_application",
            "Scope Division": "scope_division",
            "Cluster Readiness": "cluster_readiness",
        },
    ),
}


def field_registry(data_type: DataType) -> FieldRegistry:
    return _REGISTRIES[data_type]


type CriterionValue = str | date | None


@dataclass(frozen=True, slots=True)
class QueryCriterion:
    data_type: DataType
    field: FieldSpec
    operator: Operator
    value: CriterionValue = None


def parse_display_date(value: str, *, date_format: str = DISPLAY_DATE_FORMAT) -> date:
    try:
        return datetime.strptime(value.strip(), date_format).date()  # noqa: DTZ007
    except ValueError as exc:
        raise InvalidDateFormatError(value, date_format) from exc


def build_criterion(
    data_type: DataType,
    field_label: str,
    operator: str | Operator,
    value: str | None = None,
    *,
    date_format: str = DISPLAY_DATE_FORMAT,
) -> QueryCriterion:
    """Resolve label and operator, and parse the value for the field's kind."""

    spec = field_registry(data_type).resolve(field_label)
    resolved = operator if isinstance(operator, Operator) else Operator.parse(operator)
    if resolved not in spec.operators:
        raise InvalidOperatorError(
            resolved.value,
            f"not applicable to {spec.kind.value} field {spec.label!r}",
        )

    if not resolved.needs_value:
        return QueryCriterion(data_type, spec, resolved)
    if value is None or not value.strip():
        raise MissingValueError(spec.label, resolved.value)
    if spec.kind is FieldKind.DATE:
        return QueryCriterion(
            data_type,
            spec,
            resolved,
            parse_display_date(value, date_format=date_format),
        )
    return QueryCriterion(data_type, spec, resolved, value)


def run_query(
    data_type: DataType,
    field_label: str,
    operator: str | Operator,
    value: str | None = None,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    config: QueryConfig | None = None,
    limit: int | None = None,
) -> list[StoredRecord]:
    """Execute one bounded lookup against the store matching ``data_type``.

    ``limit`` can only narrow the configured cap, never lift it.
    """

    if limit is not None and limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")
    effective = config or QueryConfig()
    criterion = build_criterion(
        data_type,
        field_label,
        operator,
        value,
        date_format=effective.date_format,
    )
    bound = min(
        effective.max_results if limit is None else limit,
        effective.max_results,
        MAX_QUERY_RESULTS,
    )

    with unit_of_work_factory() as uow:
        rows = uow.repositories.for_data_type(data_type).find(criterion, limit=bound)

    log.info(
        "Query finished operation=query data_type=%s field=%s operator=%s rows=%s",
        data_type.value,
        criterion.field.attribute,
        criterion.operator.value,
        len(rows),
    )
    return rows
