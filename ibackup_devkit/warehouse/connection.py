"""
Target database connections

DatabaseConnectionPool talks to PostgreSQL through psycopg3 and psycopg_pool.
SQLiteConnection is the embedded alternative with the same query interface;
statements are written with %s placeholders and adapted for SQLite.
"""
import sqlite3
import time
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from psycopg import OperationalError
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from ibackup_devkit.core.transform import format_timestamp

from .config import DatabaseSettings

POSTGRES = "postgres"
SQLITE = "sqlite"


class DatabaseConnectionPool:
    """
    PostgreSQL connection pool manager using psycopg3
    """

    dialect = POSTGRES

    def __init__(
        self,
        settings: DatabaseSettings,
        min_size: int = 1,
        max_size: int = 2,
    ) -> None:
        """
        Args:
            settings: Connection settings, usually DatabaseSettings.from_env()
            min_size: Minimum pool size
            max_size: Maximum pool size
        """
        self.settings = settings
        self.conninfo = settings.conninfo
        self.min_size = min_size
        self.max_size = max_size
        self.timeout = float(settings.connect_timeout)

        self._pool: ConnectionPool | None = None

    def open(self, max_retries: int = 3, retry_delay: float = 2.0) -> None:
        """
        Open the connection pool with retry logic.

        Raises:
            OperationalError: If connection fails after all retries
        """
        if self._pool is not None:
            return

        for attempt in range(1, max_retries + 1):
            pool = ConnectionPool(
                conninfo=self.conninfo,
                min_size=self.min_size,
                max_size=self.max_size,
                timeout=self.timeout,
                kwargs={"row_factory": dict_row},
                open=False,
            )
            try:
                pool.open(wait=True, timeout=self.timeout)
                self._pool = pool
                return
            except OperationalError as e:
                pool.close()
                if attempt < max_retries:
                    time.sleep(retry_delay)
                else:
                    raise OperationalError(
                        f"Failed to connect to database after {max_retries} attempts: {e}"
                    ) from e

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool = None

    @contextmanager
    def get_connection(self):
        """
        Get a connection from the pool

        Raises:
            RuntimeError: If pool is not open
        """
        if self._pool is None:
            raise RuntimeError("Connection pool is not open. Call open() first.")

        with self._pool.connection() as conn:
            yield conn

    def execute_query(self, query: str, params: tuple | None = None) -> list[dict]:
        """Execute a SELECT query and return rows as dictionaries"""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return cur.fetchall()

    def execute_command(self, command: str, params: tuple | None = None) -> int:
        """Execute an INSERT/UPDATE/DDL command and return the affected row count"""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(command, params)
                rowcount = cur.rowcount
            conn.commit()
            return rowcount

    def execute_returning(self, command: str, params: tuple | None = None) -> dict | None:
        """Execute a command with a RETURNING clause and return the first row"""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(command, params)
                row = cur.fetchone()
            conn.commit()
            return row

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class SQLiteConnection:
    """
    Single-file SQLite database with the DatabaseConnectionPool interface
    """

    dialect = SQLITE

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._conn: sqlite3.Connection | None = None

    def open(self) -> None:
        if self._conn is not None:
            return

        self._conn = sqlite3.connect(str(self.path))
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @contextmanager
    def get_connection(self):
        """
        Yield the open connection, committing on success

        Raises:
            RuntimeError: If the database is not open
        """
        if self._conn is None:
            raise RuntimeError("Database is not open. Call open() first.")

        try:
            yield self._conn
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise

    def execute_query(self, query: str, params: tuple | None = None) -> list[dict]:
        with self.get_connection() as conn:
            rows = conn.execute(_adapt_sql(query), _adapt_params(params)).fetchall()
            return [dict(row) for row in rows]

    def execute_command(self, command: str, params: tuple | None = None) -> int:
        with self.get_connection() as conn:
            return conn.execute(_adapt_sql(command), _adapt_params(params)).rowcount

    def execute_returning(self, command: str, params: tuple | None = None) -> dict | None:
        with self.get_connection() as conn:
            row = conn.execute(_adapt_sql(command), _adapt_params(params)).fetchone()
            return dict(row) if row is not None else None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def _adapt_sql(sql: str) -> str:
    return sql.replace("%s", "?")


def _adapt_params(params: tuple | None) -> tuple:
    if params is None:
        return ()

    adapted = []
    for value in params:
        if isinstance(value, datetime):
            value = format_timestamp(value)
        adapted.append(value)

    return tuple(adapted)
