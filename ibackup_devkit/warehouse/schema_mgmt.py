"""
DDL for the relational set schema.

Tables are created if missing; existing tables are left untouched.
"""

from .connection import POSTGRES, SQLITE

_COLUMN_TYPES = {
    POSTGRES: {
        "pk": "BIGSERIAL PRIMARY KEY",
        "ts": "TIMESTAMPTZ",
        "bool": "BOOLEAN",
        "int": "BIGINT",
    },
    SQLITE: {
        "pk": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "ts": "TEXT",
        "bool": "INTEGER",
        "int": "INTEGER",
    },
}

_TRANSFORMERS_DDL = """
    CREATE TABLE IF NOT EXISTS transformers (
        id {pk},
        name TEXT NOT NULL,
        match_pattern TEXT NOT NULL,
        replacement TEXT NOT NULL,
        UNIQUE (match_pattern, replacement)
    )
"""

_SETS_DDL = """
    CREATE TABLE IF NOT EXISTS sets (
        id {pk},
        name TEXT NOT NULL,
        requester TEXT NOT NULL,
        transformer_id {int} NOT NULL REFERENCES transformers (id),
        reason TEXT NOT NULL,
        review_date {ts} NOT NULL,
        delete_date {ts} NOT NULL,
        metadata TEXT NOT NULL,
        monitor_time {int} NOT NULL DEFAULT 0,
        monitor_removals {bool} NOT NULL DEFAULT FALSE,
        description TEXT NOT NULL DEFAULT '',
        delete_local {bool} NOT NULL DEFAULT FALSE,
        error TEXT NOT NULL DEFAULT '',
        warning TEXT NOT NULL DEFAULT '',
        status TEXT NOT NULL,
        started_discovery {ts},
        last_discovery {ts},
        last_completed {ts},
        last_completed_count {int} NOT NULL DEFAULT 0,
        last_completed_size {int} NOT NULL DEFAULT 0,
        size_uploaded {int} NOT NULL DEFAULT 0,
        size_removed {int} NOT NULL DEFAULT 0,
        num_objects_to_be_removed {int} NOT NULL DEFAULT 0,
        num_objects_removed {int} NOT NULL DEFAULT 0,
        hidden {bool} NOT NULL DEFAULT FALSE,
        read_only {bool} NOT NULL DEFAULT FALSE,
        UNIQUE (name, requester)
    )
"""

TABLES = ("sets", "transformers")


class SchemaManager:
    """
    Creates the transformers and sets tables for a given dialect.
    """

    def __init__(self, pool):
        """
        Args:
            pool: DatabaseConnectionPool or SQLiteConnection
        """
        self.pool = pool
        self.column_types = _COLUMN_TYPES[pool.dialect]

    def create_schema(self) -> None:
        for ddl in (_TRANSFORMERS_DDL, _SETS_DDL):
            self.pool.execute_command(ddl.format(**self.column_types))

    def drop_schema(self) -> None:
        """Drop all set tables. Used to reset test databases."""
        for table in TABLES:
            self.pool.execute_command(f"DROP TABLE IF EXISTS {table}")
