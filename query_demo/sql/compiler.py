"""Render statements to MySQL text in a single pass.

The compiler walks a statement and dispatches on each node's
``__visit_name__`` to a ``visit_*`` method, collecting bind values in
order of appearance. Identifiers are always backtick-quoted.
"""

import json
from dataclasses import dataclass
from typing import Any

import sqlalchemy as sa

from .elements import DEFAULT, Eq, Like, NotEq, Ordering


@dataclass(frozen=True)
class CompiledQuery:
    """Rendered SQL text plus its positional bind values."""

    sql: str
    binds: tuple

    def __str__(self) -> str:
        return f"{self.sql} -- binds: [{', '.join(format_bind(b) for b in self.binds)}]"


def format_bind(value: Any) -> str:
    """Human-readable bind value for the ``-- binds:`` comment."""
    return json.dumps(value, default=str, ensure_ascii=False)


def quote(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


class MySQLCompiler:
    """Single-use renderer; create one per statement."""

    def __init__(self, placeholder: str = "?"):
        self.placeholder = placeholder
        self.binds: list[Any] = []

    def process(self, node: Any) -> str:
        visit_name = getattr(node, "__visit_name__", None)
        visit = getattr(self, f"visit_{visit_name}", None) if visit_name else None
        if visit is None:
            raise TypeError(f"Cannot compile {type(node).__name__}")
        return visit(node)

    def bind(self, value: Any) -> str:
        self.binds.append(value)
        return self.placeholder

    def qualified(self, column: sa.Column) -> str:
        return f"{quote(column.table.name)}.{quote(column.name)}"

    # === Predicates and ordering ===

    def visit_eq(self, node: Eq) -> str:
        return f"{self.qualified(node.column)} = {self.bind(node.value)}"

    def visit_not_eq(self, node: NotEq) -> str:
        return f"{self.qualified(node.column)} != {self.bind(node.value)}"

    def visit_like(self, node: Like) -> str:
        return f"{self.qualified(node.column)} LIKE {self.bind(node.pattern)}"

    def visit_ordering(self, node: Ordering) -> str:
        direction = " DESC" if node.descending else ""
        return f"{self.qualified(node.column)}{direction}"

    def where_clause(self, predicates: tuple) -> str:
        if not predicates:
            return ""
        return " WHERE " + " AND ".join(self.process(p) for p in predicates)

    # === Statements ===

    def visit_insert(self, stmt) -> str:
        target = f"{stmt.verb} INTO {quote(stmt.table.name)}"
        if stmt.use_defaults:
            return f"{target} () VALUES ()"
        column_list = ", ".join(quote(c.name) for c in stmt.columns)
        rendered_rows = []
        for row in stmt.rows:
            slots = ["DEFAULT" if value is DEFAULT else self.bind(value) for value in row]
            rendered_rows.append(f"({', '.join(slots)})")
        return f"{target} ({column_list}) VALUES {', '.join(rendered_rows)}"

    def visit_update(self, stmt) -> str:
        if not stmt.assignments:
            raise ValueError(f"UPDATE {stmt.table.name} requires at least one assignment")
        assignments = ", ".join(
            f"{quote(a.column.name)} = {self.bind(a.value)}" for a in stmt.assignments
        )
        sql = f"UPDATE {quote(stmt.table.name)} SET {assignments}"
        return sql + self.where_clause(stmt.predicates)

    def visit_delete(self, stmt) -> str:
        return f"DELETE FROM {quote(stmt.table.name)}" + self.where_clause(stmt.predicates)

    def visit_select(self, stmt) -> str:
        if stmt.is_count:
            projection = "COUNT(*)"
        else:
            projection = ", ".join(self.qualified(c) for c in stmt.selected)
        distinct = "DISTINCT " if stmt.is_distinct else ""
        sql = f"SELECT {distinct}{projection} FROM {quote(stmt.table.name)}"
        sql += self.where_clause(stmt.predicates)
        if stmt.orderings:
            sql += " ORDER BY " + ", ".join(self.process(o) for o in stmt.orderings)
        if stmt.limit_value is not None:
            sql += f" LIMIT {self.bind(stmt.limit_value)}"
        if stmt.offset_value is not None:
            sql += f" OFFSET {self.bind(stmt.offset_value)}"
        return sql


def compile_query(statement: Any, placeholder: str = "?") -> CompiledQuery:
    compiler = MySQLCompiler(placeholder)
    sql = compiler.process(statement)
    return CompiledQuery(sql, tuple(compiler.binds))


def debug_query(statement: Any) -> str:
    """Render ``statement`` with ``?`` placeholders and a trailing binds comment."""
    return str(compile_query(statement))
