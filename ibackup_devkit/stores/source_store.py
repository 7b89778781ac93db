"""
Bucketed key-value store for sets, backed by a single SQLite file.

Values are the JSON form of SourceSet, keyed by SourceSet.id() in the "sets"
bucket. Each write is committed on its own.
"""

import os
import sqlite3
from pathlib import Path

from pydantic import ValidationError

from ibackup_devkit.core.exceptions import StoreError
from ibackup_devkit.core.models import SourceSet

SETS_BUCKET = "sets"

_CREATE_KV = """
    CREATE TABLE IF NOT EXISTS kv (
        bucket TEXT NOT NULL,
        key TEXT NOT NULL,
        value BLOB NOT NULL,
        PRIMARY KEY (bucket, key)
    )
"""


class SourceStore:
    """
    Set store used by the ibackup server before the relational schema.

    Usage:
        with SourceStore.open(path) as store:
            sets = store.get_all()
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        try:
            self._conn: sqlite3.Connection | None = sqlite3.connect(str(self.path))
            self._conn.execute(_CREATE_KV)
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"cannot open set database {self.path}: {e}") from e

    @classmethod
    def open(cls, path: str | Path) -> "SourceStore":
        """
        Open an existing store.

        Raises:
            FileNotFoundError: If nothing exists at path
        """
        os.stat(path)
        return cls(path)

    @classmethod
    def create(cls, path: str | Path) -> "SourceStore":
        """Open a store, creating the file if needed."""
        return cls(path)

    def get_all(self) -> list[SourceSet]:
        """Return every set in the store, ordered by key."""
        rows = self._execute(
            "SELECT key, value FROM kv WHERE bucket = ? ORDER BY key", (SETS_BUCKET,)
        ).fetchall()

        return [_decode(key, value) for key, value in rows]

    def get(self, set_id: str) -> SourceSet | None:
        """Return the set stored under set_id, or None."""
        row = self._execute(
            "SELECT value FROM kv WHERE bucket = ? AND key = ?", (SETS_BUCKET, set_id)
        ).fetchone()

        return _decode(set_id, row[0]) if row else None

    def add_or_update(self, source_set: SourceSet) -> None:
        """Insert the set, or replace the stored set with the same id."""
        self._execute(
            "INSERT INTO kv (bucket, key, value) VALUES (?, ?, ?) "
            "ON CONFLICT (bucket, key) DO UPDATE SET value = excluded.value",
            (SETS_BUCKET, source_set.id(), source_set.model_dump_json()),
            commit=True,
        )

    def hide(self, source_set: SourceSet) -> None:
        """Mark the set hidden and store it."""
        self.add_or_update(source_set.model_copy(update={"hide": True}))

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _execute(self, sql: str, params: tuple, commit: bool = False) -> sqlite3.Cursor:
        if self._conn is None:
            raise StoreError(f"set database {self.path} is closed")

        try:
            cur = self._conn.execute(sql, params)
            if commit:
                self._conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"set database {self.path}: {e}") from e

        return cur

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def _decode(key: str, value: str) -> SourceSet:
    try:
        return SourceSet.model_validate_json(value)
    except ValidationError as e:
        raise StoreError(f"corrupt set entry {key}: {e}") from e
