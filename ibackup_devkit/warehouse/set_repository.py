"""
Relational set storage.

Sets are created once; afterwards only their hidden and read-only flags can
change, through set_hidden and set_readonly.
"""

import json
import sqlite3
from contextlib import contextmanager

import psycopg

from ibackup_devkit.core.exceptions import DuplicateSetError, StoreError
from ibackup_devkit.core.models import TargetSet, Transformer

from .schema_mgmt import SchemaManager

_SET_COLUMNS = (
    "name",
    "requester",
    "transformer_id",
    "reason",
    "review_date",
    "delete_date",
    "metadata",
    "monitor_time",
    "monitor_removals",
    "description",
    "delete_local",
    "error",
    "warning",
    "status",
    "started_discovery",
    "last_discovery",
    "last_completed",
    "last_completed_count",
    "last_completed_size",
    "size_uploaded",
    "size_removed",
    "num_objects_to_be_removed",
    "num_objects_removed",
)

_DB_ERRORS = (psycopg.Error, sqlite3.Error)
_INTEGRITY_ERRORS = (psycopg.IntegrityError, sqlite3.IntegrityError)


@contextmanager
def _store_errors(action: str):
    try:
        yield
    except _DB_ERRORS as e:
        raise StoreError(f"failed to {action}: {e}") from e


class SetRepository:
    """
    Writes migrated sets and their transformers to the target database.

    Usage:
        with SetRepository(SQLiteConnection(path)) as repo:
            repo.create_set(target)
    """

    def __init__(self, pool, create_schema: bool = True):
        """
        Args:
            pool: DatabaseConnectionPool or SQLiteConnection, opened on enter
            create_schema: Create missing tables when opened
        """
        self.pool = pool
        self.create_schema = create_schema

    def open(self) -> None:
        self.pool.open()
        if self.create_schema:
            with _store_errors("create schema"):
                SchemaManager(self.pool).create_schema()

    def close(self) -> None:
        self.pool.close()

    def create_set(self, target: TargetSet) -> int:
        """
        Insert a set, storing its transformer first if it is new.

        Sets target.id to the new row id.

        Returns:
            Row id of the new set

        Raises:
            DuplicateSetError: If a set with this name and requester exists
            StoreError: On any other database failure
        """
        with _store_errors(f"create set {target.requester}/{target.name}"):
            transformer_id = self._transformer_id(target.transformer)

            placeholders = ", ".join(["%s"] * len(_SET_COLUMNS))
            command = (
                f"INSERT INTO sets ({', '.join(_SET_COLUMNS)}) "
                f"VALUES ({placeholders}) RETURNING id"
            )
            try:
                row = self.pool.execute_returning(
                    command, self._set_params(target, transformer_id)
                )
            except _INTEGRITY_ERRORS as e:
                raise DuplicateSetError(target.name, target.requester) from e

        target.id = row["id"]

        return target.id

    def set_hidden(self, target: TargetSet) -> None:
        self._set_flag(target, "hidden")

    def set_readonly(self, target: TargetSet) -> None:
        self._set_flag(target, "read_only")

    def get_set(self, name: str, requester: str) -> TargetSet | None:
        with _store_errors(f"get set {requester}/{name}"):
            rows = self.pool.execute_query(
                "SELECT s.*, t.name AS transformer_name, t.match_pattern, t.replacement "
                "FROM sets s JOIN transformers t ON t.id = s.transformer_id "
                "WHERE s.name = %s AND s.requester = %s",
                (name, requester),
            )

        if not rows:
            return None

        row = rows[0]
        transformer = Transformer(
            name=row.pop("transformer_name"),
            match=row.pop("match_pattern"),
            replace=row.pop("replacement"),
        )
        row.pop("transformer_id")
        row["metadata"] = json.loads(row["metadata"])

        return TargetSet(transformer=transformer, **row)

    def _set_flag(self, target: TargetSet, column: str) -> None:
        if target.id is None:
            raise StoreError(f"set {target.requester}/{target.name} has not been created")

        with _store_errors(f"set {column} on {target.requester}/{target.name}"):
            self.pool.execute_command(
                f"UPDATE sets SET {column} = %s WHERE id = %s", (True, target.id)
            )

        setattr(target, column, True)

    def _transformer_id(self, transformer: Transformer) -> int:
        # One row per (match, replace) pair; the first name seen is kept.
        rows = self.pool.execute_query(
            "SELECT id FROM transformers WHERE match_pattern = %s AND replacement = %s",
            (transformer.match, transformer.replace),
        )
        if rows:
            return rows[0]["id"]

        row = self.pool.execute_returning(
            "INSERT INTO transformers (name, match_pattern, replacement) "
            "VALUES (%s, %s, %s) RETURNING id",
            (transformer.name, transformer.match, transformer.replace),
        )
        return row["id"]

    @staticmethod
    def _set_params(target: TargetSet, transformer_id: int) -> tuple:
        values = target.model_dump(include=set(_SET_COLUMNS))
        values["transformer_id"] = transformer_id
        values["reason"] = target.reason.value
        values["status"] = target.status.value
        values["metadata"] = json.dumps(target.metadata, sort_keys=True)

        return tuple(values[column] for column in _SET_COLUMNS)

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
