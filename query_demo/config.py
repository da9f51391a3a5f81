"""Configuration management for query-demo."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from sqlalchemy.engine import URL, make_url

logger = logging.getLogger(__name__)

# Driver used when DATABASE_URL names plain "mysql"
DEFAULT_MYSQL_DRIVER = "mysql+mysqlconnector"


@dataclass
class DatabaseConfig:
    """MySQL database configuration."""

    url: str = ""  # set via DATABASE_URL
    echo: bool = False  # log SQLAlchemy engine activity

    @property
    def sqlalchemy_url(self) -> URL:
        """Connection URL with the MySQL driver filled in."""
        url = make_url(self.url)
        if url.drivername == "mysql":
            url = url.set(drivername=DEFAULT_MYSQL_DRIVER)
        return url

    @property
    def display_url(self) -> str:
        """Connection URL safe for logs and error messages."""
        try:
            return make_url(self.url).render_as_string(hide_password=True)
        except Exception:
            return "<invalid url>"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration container."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    A ``.env`` file in the working directory is loaded first; variables
    already set in the process environment win over it.

    Args:
        config_path: Path to config file. Defaults to config/default.yaml

    Returns:
        Populated Config dataclass
    """
    load_dotenv(find_dotenv(usecwd=True))

    if config_path is None:
        candidates = [
            Path("config/default.yaml"),
            Path(__file__).parent.parent / "config" / "default.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                config_path = str(candidate)
                break

    config = Config()

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            data = yaml.safe_load(f)

        if data:
            if "database" in data:
                config.database = DatabaseConfig(**data["database"])
            if "logging" in data:
                config.logging = LoggingConfig(**data["logging"])

    # Environment variable overrides
    if os.environ.get("DATABASE_URL"):
        config.database.url = os.environ["DATABASE_URL"]
    if os.environ.get("QUERY_DEMO_DB_ECHO"):
        config.database.echo = os.environ["QUERY_DEMO_DB_ECHO"].lower() == "true"
    if os.environ.get("QUERY_DEMO_LOG_LEVEL"):
        config.logging.level = os.environ["QUERY_DEMO_LOG_LEVEL"]

    return config


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure logging based on configuration.

    Args:
        config: Logging configuration
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.file))

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
    )

    # Engine echo goes through its own logger; keep it quiet unless asked
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("alembic").setLevel(logging.WARNING)

    logger.info(f"Logging configured at level {config.level}")
