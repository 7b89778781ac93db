"""
Connection settings for the networked target database.
"""
import os

from psycopg.conninfo import make_conninfo
from pydantic import BaseModel, Field

from ibackup_devkit.core.exceptions import MissingCredentialsError

# Setting name -> environment variable
ENV_VARS = {
    "host": "DB_HOST",
    "port": "DB_PORT",
    "database": "DB_NAME",
    "user": "DB_USER",
    "password": "DB_PASSWORD",
}


class DatabaseSettings(BaseModel):
    """
    PostgreSQL connection settings. Every value is required.
    """

    host: str = Field(..., min_length=1)
    port: int = Field(..., gt=0, lt=65536)
    database: str = Field(..., min_length=1)
    user: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    connect_timeout: int = 30

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "DatabaseSettings":
        """
        Read settings from DB_HOST, DB_PORT, DB_NAME, DB_USER and DB_PASSWORD.

        Raises:
            MissingCredentialsError: If any variable is unset or empty
        """
        environ = os.environ if environ is None else environ

        values = {field: environ.get(var, "") for field, var in ENV_VARS.items()}
        missing = [ENV_VARS[field] for field, value in values.items() if not value]
        if missing:
            raise MissingCredentialsError(missing)

        return cls(**values)

    @property
    def conninfo(self) -> str:
        return make_conninfo(
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password,
            connect_timeout=self.connect_timeout,
        )
