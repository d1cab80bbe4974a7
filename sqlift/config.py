"""
Database connection settings.

Settings come from ``DB_*`` environment variables, optionally seeded from a
``.env`` file. Variables already present in the environment win over the
file.
"""

from pathlib import Path
from typing import Optional, Union

from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from .errors import ConfigError
from .logging_config import get_logger

logger = get_logger(__name__)

DRIVER_NAME = "postgresql+psycopg"


class DbConfig(BaseSettings):
    """Connection settings for the database being introspected."""

    model_config = SettingsConfigDict(
        env_prefix="DB_", env_file_encoding="utf-8", extra="ignore"
    )

    host: str = "localhost"
    port: int = Field(default=5432, ge=1, le=65535)
    name: str
    user: str
    password: SecretStr

    @classmethod
    def load(cls, env_file: Optional[Union[str, Path]] = None) -> "DbConfig":
        """
        Load settings from the environment and an optional ``.env`` file.

        A missing ``.env`` file is not an error; the environment is used as is.

        Args:
            env_file: Path to a ``.env`` file

        Returns:
            Validated DbConfig

        Raises:
            ConfigError: If a required variable is missing or a value is invalid
        """
        source = None
        if env_file is not None:
            path = Path(env_file)
            if path.exists():
                logger.debug("Loading environment file %s", path)
                source = path
            else:
                logger.warning(
                    "Environment file %s not found, using existing environment", path
                )

        try:
            config = cls(_env_file=source)
        except ValidationError as e:
            problems = []
            for error in e.errors():
                field_name = str(error["loc"][0]) if error["loc"] else "?"
                variable = f"DB_{field_name.upper()}"
                if error["type"] == "missing":
                    problems.append(f"{variable} is required")
                else:
                    problems.append(f"{variable}: {error['msg']}")
            logger.error("Invalid database configuration: %s", "; ".join(problems))
            raise ConfigError("; ".join(problems)) from e

        logger.debug("Configuration loaded: %s", config.redacted_url())
        return config

    def sqlalchemy_url(self) -> URL:
        """Build the SQLAlchemy URL for this database."""
        return URL.create(
            DRIVER_NAME,
            username=self.user,
            password=self.password.get_secret_value(),
            host=self.host,
            port=self.port,
            database=self.name,
        )

    def redacted_url(self) -> str:
        """Connection URL with the password masked, safe for logs and errors."""
        return self.sqlalchemy_url().render_as_string(hide_password=True)
