"""
Relational target store for migrated sets.
"""

from .config import DatabaseSettings
from .connection import DatabaseConnectionPool, SQLiteConnection
from .schema_mgmt import SchemaManager
from .set_repository import SetRepository

__all__ = [
    "DatabaseSettings",
    "DatabaseConnectionPool",
    "SQLiteConnection",
    "SchemaManager",
    "SetRepository",
]
