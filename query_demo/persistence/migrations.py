"""Apply the Alembic migrations shipped in the project's alembic/ directory."""

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig

from ..config import DatabaseConfig
from ..exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def alembic_config(database: DatabaseConfig) -> AlembicConfig:
    cfg = AlembicConfig(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    if database.url:
        url = database.sqlalchemy_url.render_as_string(hide_password=False)
        # configparser interpolation
        cfg.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return cfg


def upgrade_schema(database: DatabaseConfig, revision: str = "head") -> None:
    """Upgrade the database schema to ``revision``."""
    if not database.url:
        raise DatabaseConnectionError("DATABASE_URL must be set")
    logger.info(f"Upgrading {database.display_url} to {revision}")
    command.upgrade(alembic_config(database), revision)
