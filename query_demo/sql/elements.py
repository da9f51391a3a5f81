"""Expression nodes for the statement builder.

Column handles are the SQLAlchemy ``Column`` objects from
``query_demo.persistence.tables``. Nodes never compare columns with ``==``
(that builds a SQLAlchemy clause); lookups go through ``column.name``.
"""

from dataclasses import dataclass
from typing import Any

import sqlalchemy as sa


class _Default:
    """Marker for a value the database fills from the column default."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DEFAULT"


DEFAULT = _Default()


@dataclass(frozen=True, eq=False)
class Eq:
    """``column = value``. Doubles as a predicate and as an assignment."""

    __visit_name__ = "eq"

    column: sa.Column
    value: Any


@dataclass(frozen=True, eq=False)
class NotEq:
    __visit_name__ = "not_eq"

    column: sa.Column
    value: Any


@dataclass(frozen=True, eq=False)
class Like:
    __visit_name__ = "like"

    column: sa.Column
    pattern: str


@dataclass(frozen=True, eq=False)
class Ordering:
    __visit_name__ = "ordering"

    column: sa.Column
    descending: bool = False


Predicate = Eq | NotEq | Like


def eq(column: sa.Column, value: Any) -> Eq:
    return Eq(column, value)


def ne(column: sa.Column, value: Any) -> NotEq:
    return NotEq(column, value)


def like(column: sa.Column, pattern: str) -> Like:
    return Like(column, pattern)


def asc(column: sa.Column) -> Ordering:
    return Ordering(column, descending=False)


def desc(column: sa.Column) -> Ordering:
    return Ordering(column, descending=True)


def primary_key_column(table: sa.Table) -> sa.Column:
    """Return the single primary key column of ``table``."""
    columns = list(table.primary_key.columns)
    if len(columns) != 1:
        raise ValueError(f"Table {table.name} must have exactly one primary key column")
    return columns[0]
