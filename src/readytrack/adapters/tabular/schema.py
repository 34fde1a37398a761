"""Pydantic models describing one row of each source spreadsheet export.

Field aliases are the column headers people see in the templates; the python
names are accepted as well.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

ROW_DATE_FORMATS: tuple[str, ...] = ("%d-%m-%Y", "%Y-%m-%d", "%d/%m/%Y", "%b %d, %Y")


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _parse_date(value: object) -> object:
    value = _blank_to_none(value)
    if not isinstance(value, str):
        return value
    for fmt in ROW_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()  # noqa: DTZ007
        except ValueError:
            continue
    raise ValueError(f"unrecognised date {value!r}")


class TabularRow(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class AccessRow(TabularRow):
    access_group: str = Field(alias="Access Group")
    account: str = Field(alias="Account")
    application_name: str | None = Field(default=None, alias="Application Name")
    application_suite: str | None = Field(default=None, alias="Application Suite")
    environment_tier: str | None = Field(default=None, alias="Environment Tier")
    criticality: str | None = Field(default=None, alias="Criticality")

    _normalize_text = field_validator(
        "application_name",
        "application_suite",
        "environment_tier",
        "criticality",
        mode="before",
    )(_blank_to_none)


class EmploymentRow(TabularRow):
    account: str = Field(alias="Account")
    department: str | None = Field(default=None, alias="Department")
    job_role: str | None = Field(default=None, alias="Job Role")
    division: str | None = Field(default=None, alias="Division")
    leave_date: date | None = Field(default=None, alias="Leave Date")
    department_simple: str | None = Field(default=None, alias="Department Simple")

    _normalize_text = field_validator(
        "department", "job_role", "division", "department_simple", mode="before"
    )(_blank_to_none)
    _normalize_date = field_validator("leave_date", mode="before")(_parse_date)


class PackagingRow(TabularRow):
    application_name: str = Field(alias="Application Name")
    status: str = Field(alias="Package Status")
    readiness_date: date | None = Field(default=None, alias="Package Readiness Date")

    _normalize_date = field_validator("readiness_date", mode="before")(_parse_date)


class TestingRow(TabularRow):
    __test__ = False

    application_name: str = Field(alias="Application Name")
    status: str = Field(alias="Test Status")
    result: str = Field(alias="Test Result")
    test_date: date | None = Field(default=None, alias="Test Date")
    plan_date: date | None = Field(default=None, alias="Test Plan Date")
    comments: str | None = Field(default=None, alias="Test Comments")

    _normalize_text = field_validator("comments", mode="before")(_blank_to_none)
    _normalize_dates = field_validator("test_date", "plan_date", mode="before")(_parse_date)


class MigrationPlanRow(TabularRow):
    application_name: str = Field(alias="Application Name")
    application_new: str | None = Field(default=None, alias="Application New")
    suite_new: str | None = Field(default=None, alias="Application Suite New")
    target_application: str | None = Field(default=None, alias="Will Be")
    scope_division: str | None = Field(default=None, alias="In/Out Scope Division")
    platform: str | None = Field(default=None, alias="Migration Platform")
    readiness: str | None = Field(default=None, alias="Migration Application Readiness")

    _normalize_text = field_validator(
        "application_new",
        "suite_new",
        "target_application",
        "scope_division",
        "platform",
        "readiness",
        mode="before",
    )(_blank_to_none)


class ClusterRow(TabularRow):
    department: str = Field(alias="Department")
    department_simple: str | None = Field(default=None, alias="Department Simple")
    domain: str | None = Field(default=None, alias="Domain")
    migration_cluster: str | None = Field(default=None, alias="Migration Cluster")
    cluster_readiness: str | None = Field(default=None, alias="Migration Cluster Readiness")

    _normalize_text = field_validator(
        "department_simple",
        "domain",
        "migration_cluster",
        "cluster_readiness",
        mode="before",
    )(_blank_to_none)


type SourceRow = AccessRow | EmploymentRow | PackagingRow | TestingRow | MigrationPlanRow | ClusterRow
