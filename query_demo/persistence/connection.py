"""Engine and connection lifecycle, plus transaction scopes.

Connections are not pooled: every ``establish_connection`` scope creates
an engine with ``NullPool``, opens one connection and disposes of both on
exit, including when the body raises.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, exc
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import NullPool

from ..config import DatabaseConfig
from ..exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)


def create_db_engine(config: DatabaseConfig) -> Engine:
    """Create a non-pooling engine for ``config.url``."""
    if not config.url:
        raise DatabaseConnectionError("DATABASE_URL must be set")
    try:
        url = config.sqlalchemy_url
    except exc.ArgumentError as e:
        raise DatabaseConnectionError(f"Invalid database URL: {e}") from e
    return create_engine(url, poolclass=NullPool, echo=config.echo)


@contextmanager
def establish_connection(config: DatabaseConfig) -> Iterator[Connection]:
    """Open one connection for the duration of the ``with`` block."""
    engine = create_db_engine(config)
    try:
        try:
            conn = engine.connect()
        except exc.DBAPIError as e:
            raise DatabaseConnectionError(
                f"Error connecting to {config.display_url}", url=config.display_url
            ) from e
        logger.debug(f"Connected to {config.display_url}")
        with conn:
            yield conn
    finally:
        engine.dispose()


@contextmanager
def transaction(conn: Connection) -> Iterator[Connection]:
    """Run the block atomically.

    If ``conn`` is already inside a transaction the block joins it: an
    inner scope never commits on its own, and an error rolls back the
    whole outer transaction.
    """
    if conn.in_transaction():
        yield conn
        return
    with conn.begin():
        yield conn


@contextmanager
def rollback_transaction(conn: Connection) -> Iterator[Connection]:
    """Run the block in a transaction that is always rolled back."""
    trans = conn.begin()
    try:
        yield conn
    finally:
        trans.rollback()
