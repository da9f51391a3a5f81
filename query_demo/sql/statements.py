"""Statement builders for INSERT/REPLACE, UPDATE, DELETE and SELECT.

Builders are generative: every chained call returns a new statement and
leaves the original untouched, so a partially built query can be reused.

    insert_into(users).values([
        (eq(users.c.name, "Sean"), eq(users.c.hair_color, "Black")),
        (eq(users.c.name, "Ruby"), None),
    ])

renders ``INSERT INTO `users` (`name`, `hair_color`) VALUES (?, ?), (?, DEFAULT)``.
"""

import copy
import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any

import sqlalchemy as sa

from ..exceptions import EmptyBatchError
from .elements import DEFAULT, Eq, Ordering, Predicate, eq, primary_key_column


def _resolve_column(table: sa.Table, key: str) -> sa.Column:
    try:
        return table.c[key]
    except KeyError:
        raise ValueError(f"Unknown column {key!r} for table {table.name}") from None


def _row_items(table: sa.Table, row: Any) -> list[tuple[sa.Column, Any]]:
    """Flatten one row into ``(column, value)`` pairs.

    Tuple slots that are ``None`` declare nothing. Mapping and dataclass
    rows declare every key; a ``None`` value there means DEFAULT.
    """
    if row is None:
        return []
    if isinstance(row, Eq):
        return [(row.column, row.value)]
    if dataclasses.is_dataclass(row) and not isinstance(row, type):
        row = dataclasses.asdict(row)
    if isinstance(row, Mapping):
        return [
            (_resolve_column(table, key), DEFAULT if value is None else value)
            for key, value in row.items()
        ]
    if isinstance(row, tuple):
        items = []
        for part in row:
            if part is None:
                continue
            if not isinstance(part, Eq):
                raise TypeError(f"Insert row slots must be eq() assignments, got {part!r}")
            items.append((part.column, part.value))
        return items
    raise TypeError(f"Unsupported insert row: {row!r}")


def _normalize_rows(table: sa.Table, records: Any) -> tuple[tuple, tuple]:
    """Turn ``values()`` input into a column list and per-row value tuples."""
    rows = records if isinstance(records, list) else [records]
    if not rows:
        raise EmptyBatchError(f"Cannot insert an empty batch into {table.name}")

    columns: dict[str, sa.Column] = {}
    per_row: list[dict[str, Any]] = []
    for row in rows:
        values: dict[str, Any] = {}
        for column, value in _row_items(table, row):
            if column.table is not table:
                raise ValueError(
                    f"Column {column.table.name}.{column.name} does not belong to {table.name}"
                )
            if column.name in values:
                raise ValueError(f"Column {column.name} assigned twice in one row")
            values[column.name] = value
            columns.setdefault(column.name, column)
        per_row.append(values)

    if not columns:
        raise EmptyBatchError(f"No columns could be inferred for insert into {table.name}")

    value_rows = tuple(
        tuple(values.get(name, DEFAULT) for name in columns) for values in per_row
    )
    return tuple(columns.values()), value_rows


class _Filtered:
    """Shared WHERE handling for UPDATE, DELETE and SELECT."""

    table: sa.Table
    predicates: tuple = ()

    def _generate(self):
        return copy.copy(self)

    def filter(self, *predicates: Predicate):
        stmt = self._generate()
        stmt.predicates = self.predicates + predicates
        return stmt

    def find(self, pk_value: Any):
        """Filter on the table's primary key."""
        return self.filter(eq(primary_key_column(self.table), pk_value))


class InsertStatement:
    """INSERT, REPLACE or INSERT IGNORE into one table."""

    __visit_name__ = "insert"

    def __init__(self, table: sa.Table, verb: str = "INSERT"):
        self.table = table
        self.verb = verb
        self.columns: tuple = ()
        self.rows: tuple = ()
        self.use_defaults = False

    def values(self, records: Any) -> "InsertStatement":
        """Set the rows to insert. A ``list`` is a batch; anything else is one row."""
        stmt = copy.copy(self)
        stmt.columns, stmt.rows = _normalize_rows(self.table, records)
        stmt.use_defaults = False
        return stmt

    def default_values(self) -> "InsertStatement":
        stmt = copy.copy(self)
        stmt.columns, stmt.rows = (), ((),)
        stmt.use_defaults = True
        return stmt

    @property
    def row_count(self) -> int:
        return len(self.rows)


class UpdateStatement(_Filtered):
    __visit_name__ = "update"

    def __init__(self, table: sa.Table):
        self.table = table
        self.predicates = ()
        self.assignments: tuple = ()

    def set(self, *assignments: Eq | tuple | Mapping) -> "UpdateStatement":
        """Add assignments: ``eq()`` nodes, tuples of them, or ``{name: value}``."""
        collected = list(self.assignments)
        for item in assignments:
            if isinstance(item, Eq):
                collected.append(item)
            elif isinstance(item, Mapping):
                collected.extend(eq(_resolve_column(self.table, k), v) for k, v in item.items())
            elif isinstance(item, tuple):
                collected.extend(item)
            else:
                raise TypeError(f"Unsupported assignment: {item!r}")
        stmt = self._generate()
        stmt.assignments = tuple(collected)
        return stmt


class DeleteStatement(_Filtered):
    __visit_name__ = "delete"

    def __init__(self, table: sa.Table):
        self.table = table
        self.predicates = ()


class SelectStatement(_Filtered):
    __visit_name__ = "select"

    def __init__(self, table: sa.Table):
        self.table = table
        self.predicates = ()
        self.selected: tuple = tuple(table.columns)
        self.is_distinct = False
        self.is_count = False
        self.orderings: tuple = ()
        self.limit_value: int | None = None
        self.offset_value: int | None = None

    def columns(self, *columns: sa.Column) -> "SelectStatement":
        stmt = self._generate()
        stmt.selected = columns
        return stmt

    def distinct(self) -> "SelectStatement":
        stmt = self._generate()
        stmt.is_distinct = True
        return stmt

    def count(self) -> "SelectStatement":
        stmt = self._generate()
        stmt.is_count = True
        return stmt

    def order_by(self, *terms: Ordering | sa.Column) -> "SelectStatement":
        stmt = self._generate()
        stmt.orderings = self.orderings + tuple(
            term if isinstance(term, Ordering) else Ordering(term) for term in terms
        )
        return stmt

    def limit(self, n: int) -> "SelectStatement":
        stmt = self._generate()
        stmt.limit_value = n
        return stmt

    def offset(self, n: int) -> "SelectStatement":
        stmt = self._generate()
        stmt.offset_value = n
        return stmt


def insert_into(table: sa.Table) -> InsertStatement:
    return InsertStatement(table)


def replace_into(table: sa.Table) -> InsertStatement:
    """REPLACE: rows whose primary key exists are deleted and inserted again."""
    return InsertStatement(table, verb="REPLACE")


def insert_or_ignore_into(table: sa.Table) -> InsertStatement:
    """INSERT IGNORE: rows whose primary key exists are skipped."""
    return InsertStatement(table, verb="INSERT IGNORE")


def update(table: sa.Table) -> UpdateStatement:
    return UpdateStatement(table)


def delete(table: sa.Table) -> DeleteStatement:
    return DeleteStatement(table)


def select(table: sa.Table) -> SelectStatement:
    return SelectStatement(table)


def predicates_of(items: Iterable[Predicate] | Predicate | None) -> tuple:
    """Accept a single predicate, an iterable of them, or None."""
    if items is None:
        return ()
    if isinstance(items, Iterable):
        return tuple(items)
    return (items,)
