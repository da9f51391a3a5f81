"""Query façade: argument shapes in, one statement executed, count or rows out.

Every function takes an open connection first and runs inside
``transaction(conn)``, so a caller can group several calls atomically by
wrapping them in its own transaction scope.
"""

import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Connection, RowMapping

from .forms import parse_user_json
from .persistence import executor
from .persistence.connection import transaction
from .persistence.tables import users
from .sql import (
    Ordering,
    delete as delete_from,
    desc,
    eq,
    insert_into,
    insert_or_ignore_into,
    replace_into,
    select as select_from,
    update as update_table,
)
from .sql.elements import Predicate, primary_key_column
from .sql.statements import predicates_of

logger = logging.getLogger(__name__)


def insert_defaults(conn: Connection, table: sa.Table) -> int:
    """Insert one row made only of column defaults."""
    return executor.execute(conn, insert_into(table).default_values())


def insert_single(conn: Connection, column: sa.Column, value: Any) -> int:
    return executor.execute(conn, insert_into(column.table).values(eq(column, value)))


def insert_multiple(conn: Connection, columns: Sequence[sa.Column], values: Sequence[Any]) -> int:
    """Insert one row setting ``columns`` to ``values`` pairwise."""
    if len(columns) != len(values):
        raise ValueError(f"Got {len(columns)} columns but {len(values)} values")
    if not columns:
        raise ValueError("insert_multiple needs at least one column")
    table = columns[0].table
    row = tuple(eq(column, value) for column, value in zip(columns, values))
    return executor.execute(conn, insert_into(table).values(row))


def insert_batch(conn: Connection, table: sa.Table, rows: list) -> int:
    """Insert every row in one statement. Absent values render as DEFAULT per row."""
    return executor.execute(conn, insert_into(table).values(list(rows)))


def insert_from_form(conn: Connection, json_text: str | bytes) -> int:
    """Deserialize a user form (object or array) and insert it into ``users``."""
    parsed = parse_user_json(json_text)
    if isinstance(parsed, list):
        records = [form.as_row() for form in parsed]
    else:
        records = parsed.as_row()
    return executor.execute(conn, insert_into(users).values(records))


def update(
    conn: Connection,
    table: sa.Table,
    predicates: Iterable[Predicate] | Predicate | None,
    assignments: Any,
) -> int:
    """Apply ``assignments`` to every row matching all ``predicates``."""
    stmt = update_table(table).filter(*predicates_of(predicates))
    if isinstance(assignments, list):
        stmt = stmt.set(*assignments)
    else:
        stmt = stmt.set(assignments)
    return executor.execute(conn, stmt)


def delete(conn: Connection, table: sa.Table, predicates: Iterable[Predicate] | Predicate | None) -> int:
    return executor.execute(conn, delete_from(table).filter(*predicates_of(predicates)))


def select(
    conn: Connection,
    table: sa.Table,
    filters: Iterable[Predicate] | Predicate | None = (),
    ordering: Iterable[Ordering] = (),
    limit: int | None = None,
    columns: Sequence[sa.Column] | None = None,
) -> Iterator[RowMapping]:
    """Lazily yield matching rows ordered by ``ordering`` and cut at ``limit``."""
    stmt = select_from(table).filter(*predicates_of(filters)).order_by(*ordering)
    if columns:
        stmt = stmt.columns(*columns)
    if limit is not None:
        stmt = stmt.limit(limit)
    return executor.iter_rows(conn, stmt)


def count(conn: Connection, table: sa.Table) -> int:
    return int(executor.scalar(conn, select_from(table).count()))


def replace(conn: Connection, table: sa.Table, rows: Any) -> int:
    """Insert rows, replacing any existing row with the same primary key."""
    return executor.execute(conn, replace_into(table).values(rows))


def insert_or_ignore(conn: Connection, table: sa.Table, rows: Any) -> int:
    """Insert rows whose primary key is new; existing keys are skipped silently."""
    return executor.execute(conn, insert_or_ignore_into(table).values(rows))


def insert_returning(conn: Connection, table: sa.Table, rows: Any) -> list[RowMapping]:
    """Insert rows and read them back in insertion order.

    MySQL has no RETURNING clause, so the inserted rows are reloaded by
    ordering on the primary key descending and taking as many rows as were
    inserted. This is only correct while primary keys grow with insertion
    order and no other writer inserts between the two statements.
    """
    pk = primary_key_column(table)
    with transaction(conn):
        inserted = executor.execute(conn, insert_into(table).values(rows))
        query = select_from(table).order_by(desc(pk)).limit(inserted)
        loaded = executor.load(conn, query)
    logger.debug(f"Reloaded {len(loaded)} of {inserted} inserted rows from {table.name}")
    return list(reversed(loaded))


def sql_query(conn: Connection, sql: str, *binds: Any) -> list[RowMapping]:
    return executor.sql_query(conn, sql, *binds)
