"""Translate domain query criteria into parameterized SQLAlchemy predicates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import and_, not_, or_

from readytrack.domain.query import FieldKind, Operator

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Table

    from readytrack.domain.query import QueryCriterion


def criterion_clause(table: Table, criterion: QueryCriterion) -> ColumnElement[bool]:
    """Build the WHERE clause for ``criterion``; values are always bound parameters.

    Negative operators include NULL rows, matching how a person reads
    "department is not Finance". LIKE patterns escape ``%`` and ``_``.
    """

    column = table.c[criterion.field.attribute]
    value = criterion.value
    is_text = criterion.field.kind is FieldKind.TEXT

    match criterion.operator:
        case Operator.EQUALS:
            return column == value
        case Operator.NOT_EQUALS:
            return or_(column != value, column.is_(None))
        case Operator.CONTAINS:
            return column.contains(value, autoescape=True)
        case Operator.NOT_CONTAINS:
            return or_(not_(column.contains(value, autoescape=True)), column.is_(None))
        case Operator.STARTS_WITH:
            return column.startswith(value, autoescape=True)
        case Operator.ENDS_WITH:
            return column.endswith(value, autoescape=True)
        case Operator.IS_EMPTY:
            if is_text:
                return or_(column.is_(None), column == "")
            return column.is_(None)
        case Operator.IS_NOT_EMPTY:
            if is_text:
                return and_(column.is_not(None), column != "")
            return column.is_not(None)
        case Operator.BEFORE:
            return column < value
        case Operator.AFTER:
            return column > value
