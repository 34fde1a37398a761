"""Error taxonomy shared by the domain services and their adapters.

Per-record problems (validation, referential guard, duplicate insert) are not
errors: the importer counts them as skips. Everything defined here is raised.
"""

from __future__ import annotations


class ReadytrackError(Exception):
    """Base class for errors surfaced to callers."""


class StoreUnavailableError(ReadytrackError):
    """The persistence layer has no live connection."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"No database connection (operation={operation})")
        self.operation = operation


class TransactionFailureError(ReadytrackError):
    """A store error aborted a transaction; everything in it was rolled back."""

    def __init__(self, operation: str, detail: str | None = None) -> None:
        message = f"Transaction failed during {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation


class DuplicateRecordError(ReadytrackError):
    """An insert collided with a uniqueness constraint."""

    def __init__(self, natural_key: tuple[str, ...]) -> None:
        super().__init__(f"Duplicate natural key {natural_key!r}")
        self.natural_key = natural_key


class RebuildInvariantError(ReadytrackError):
    """The rebuilt combined view does not hold one row per access record."""


class QueryError(ReadytrackError):
    """Base class for rejected queries. Never retried."""


class InvalidOperatorError(QueryError):
    def __init__(self, operator: str, reason: str | None = None) -> None:
        message = f"Invalid operator: {operator!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.operator = operator


class InvalidDateFormatError(QueryError):
    def __init__(self, value: str, expected: str) -> None:
        super().__init__(f"Invalid date {value!r}; expected format {expected!r}")
        self.value = value
        self.expected = expected


class UnknownFieldError(QueryError):
    def __init__(self, label: str, data_type: str) -> None:
        super().__init__(f"Unknown field {label!r} for {data_type}")
        self.label = label
        self.data_type = data_type


class MissingValueError(QueryError):
    def __init__(self, label: str, operator: str) -> None:
        super().__init__(f"Operator {operator!r} on {label!r} needs a value")
        self.label = label
        self.operator = operator


class RecordNotFoundError(ReadytrackError):
    """No row holds the requested natural key."""

    def __init__(self, data_type: str, natural_key: tuple[str, ...]) -> None:
        super().__init__(f"No {data_type} record with key {natural_key!r}")
        self.data_type = data_type
        self.natural_key = natural_key
