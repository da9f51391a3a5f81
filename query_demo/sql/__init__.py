"""Statement builder and MySQL compiler."""

from .compiler import CompiledQuery, MySQLCompiler, compile_query, debug_query
from .elements import DEFAULT, Eq, Like, NotEq, Ordering, asc, desc, eq, like, ne
from .statements import (
    DeleteStatement,
    InsertStatement,
    SelectStatement,
    UpdateStatement,
    delete,
    insert_into,
    insert_or_ignore_into,
    replace_into,
    select,
    update,
)

__all__ = [
    "CompiledQuery",
    "MySQLCompiler",
    "compile_query",
    "debug_query",
    "DEFAULT",
    "Eq",
    "Like",
    "NotEq",
    "Ordering",
    "asc",
    "desc",
    "eq",
    "like",
    "ne",
    "DeleteStatement",
    "InsertStatement",
    "SelectStatement",
    "UpdateStatement",
    "delete",
    "insert_into",
    "insert_or_ignore_into",
    "replace_into",
    "select",
    "update",
]
