"""
Pytest configuration and fixtures for query-demo tests.
"""

import os
from contextlib import contextmanager
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine


class FakeMappings(list):
    def all(self):
        return list(self)


class FakeResult:
    def __init__(self, rowcount: int, rows: list[dict]):
        self.rowcount = rowcount
        self._rows = rows

    def mappings(self):
        return FakeMappings(self._rows)


class FakeConnection:
    """Stands in for a SQLAlchemy Connection; records every statement."""

    def __init__(self, paramstyle: str = "qmark", rowcount: int = 1, rows=None, error=None):
        self.dialect = SimpleNamespace(paramstyle=paramstyle)
        self.rowcount = rowcount
        self.rows = list(rows or [])
        self.error = error
        self.calls: list[tuple[str, tuple]] = []
        self.depth = 0
        self.commits = 0
        self.rollbacks = 0

    def in_transaction(self) -> bool:
        return self.depth > 0

    @contextmanager
    def begin(self):
        self.depth += 1
        try:
            yield self
        except BaseException:
            self.rollbacks += 1
            raise
        else:
            self.commits += 1
        finally:
            self.depth -= 1

    def exec_driver_sql(self, sql, params):
        self.calls.append((sql, params))
        if self.error is not None:
            raise self.error
        return FakeResult(self.rowcount, self.rows)


@pytest.fixture
def fake_conn():
    return FakeConnection()


@pytest.fixture
def make_conn():
    return FakeConnection


# ============================================================================
# Integration test fixtures (require QUERY_DEMO_TEST_DB_URL)
# ============================================================================


def has_test_db() -> bool:
    """Check if a MySQL test database is configured."""
    return bool(os.environ.get("QUERY_DEMO_TEST_DB_URL"))


@pytest.fixture
def skip_without_db():
    if not has_test_db():
        pytest.skip("QUERY_DEMO_TEST_DB_URL not set - skipping integration test")


# ============================================================================
# In-memory SQLite engine (real SQLAlchemy transaction semantics)
# ============================================================================

# SQLite accepts the compiler's backticks and ``?`` placeholders, but not
# MySQL's ON UPDATE clause, so the schema is spelled out here.
SQLITE_SCHEMA = (
    """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name VARCHAR(255) NOT NULL,
        hair_color VARCHAR(255),
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE posts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title VARCHAR(255) NOT NULL,
        body TEXT NOT NULL,
        published BOOLEAN NOT NULL DEFAULT 0
    )
    """,
)


@pytest.fixture
def sqlite_conn():
    """A real SQLAlchemy connection to a fresh in-memory database."""
    engine = create_engine("sqlite://")
    try:
        with engine.connect() as conn:
            for ddl in SQLITE_SCHEMA:
                conn.exec_driver_sql(ddl)
            conn.commit()
            yield conn
    finally:
        engine.dispose()
