"""Execute builder statements over a SQLAlchemy connection.

Statements are compiled with the placeholder matching the driver's DB-API
paramstyle and sent through ``Connection.exec_driver_sql`` with positional
parameters. Driver errors surface as ``DatabaseError``.
"""

import logging
import re
from collections.abc import Iterator
from typing import Any

from sqlalchemy import exc
from sqlalchemy.engine import Connection, CursorResult, RowMapping

from ..exceptions import DatabaseError, NotFoundError
from ..sql import CompiledQuery, compile_query
from .connection import transaction

logger = logging.getLogger(__name__)

_PLACEHOLDERS = {
    "qmark": "?",
    "format": "%s",
    "pyformat": "%s",
}

_QUOTED = re.compile(r"""('(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|`[^`]*`)""")


def placeholder_for(conn: Connection) -> str:
    paramstyle = conn.dialect.paramstyle
    try:
        return _PLACEHOLDERS[paramstyle]
    except KeyError:
        raise DatabaseError(f"Unsupported driver paramstyle: {paramstyle}") from None


def _run(conn: Connection, compiled: CompiledQuery) -> CursorResult:
    logger.debug(f"Executing: {compiled}")
    try:
        return conn.exec_driver_sql(compiled.sql, compiled.binds)
    except exc.DBAPIError as e:
        raise DatabaseError(f"{type(e.orig).__name__}: {e.orig}", statement=str(compiled)) from e


def execute(conn: Connection, statement: Any) -> int:
    """Execute an INSERT/UPDATE/DELETE statement and return the affected row count."""
    compiled = compile_query(statement, placeholder_for(conn))
    with transaction(conn):
        result = _run(conn, compiled)
        return result.rowcount


def iter_rows(conn: Connection, statement: Any) -> Iterator[RowMapping]:
    """Yield the rows of a SELECT.

    The statement runs on the first ``next()``. Rows are buffered and the
    transaction is finished before the first row is handed out, so a
    partly consumed iterator never holds a transaction open. The iterator
    is single-use.
    """
    compiled = compile_query(statement, placeholder_for(conn))
    with transaction(conn):
        rows = _run(conn, compiled).mappings().all()
    yield from rows


def load(conn: Connection, statement: Any) -> list[RowMapping]:
    return list(iter_rows(conn, statement))


def first(conn: Connection, statement: Any) -> RowMapping:
    """Return the first row of a SELECT, limiting the query to one row."""
    limited = statement.limit(1)
    rows = load(conn, limited)
    if not rows:
        raise NotFoundError("Record not found", statement=str(compile_query(limited)))
    return rows[0]


def scalar(conn: Connection, statement: Any) -> Any:
    """Return the first column of the single row a SELECT produces."""
    rows = load(conn, statement)
    if not rows:
        raise NotFoundError("Record not found", statement=str(compile_query(statement)))
    return next(iter(rows[0].values()))


def sql_query(conn: Connection, sql: str, *binds: Any) -> list[RowMapping]:
    """Run raw SQL text with positional binds written as ``?``.

    A ``?`` inside a quoted string or a backtick-quoted identifier is left
    alone.
    """
    placeholder = placeholder_for(conn)
    parts = _QUOTED.split(sql)
    # odd indices are the quoted segments
    parts[::2] = [part.replace("?", placeholder) for part in parts[::2]]
    compiled = CompiledQuery("".join(parts), binds)
    with transaction(conn):
        return _run(conn, compiled).mappings().all()
