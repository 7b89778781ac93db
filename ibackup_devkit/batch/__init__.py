"""
Whole-database operations: flag maintenance and migration.
"""

from .maintenance import update_flags
from .migration import MigrationSummary, SetMigrator

__all__ = [
    "update_flags",
    "SetMigrator",
    "MigrationSummary",
]
