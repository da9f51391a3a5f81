"""Alembic environment: runs migrations against query_demo's metadata."""

from alembic import context
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

from query_demo.config import load_config
from query_demo.persistence.tables import metadata

config = context.config
target_metadata = metadata


def _database_url():
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url
    return load_config().database.sqlalchemy_url


def run_migrations_offline() -> None:
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(_database_url(), poolclass=NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
