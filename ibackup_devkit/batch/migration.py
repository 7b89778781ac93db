"""
Key-value to relational set migration.

Flow: read all sets → convert each → create → apply read-only → apply hidden
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from pydantic import ValidationError

from ibackup_devkit.core.exceptions import DevkitError
from ibackup_devkit.core.models import SourceSet, TargetSet
from ibackup_devkit.core.transform import convert_set
from ibackup_devkit.observability.logger import get_logger


class TargetStore(Protocol):
    def create_set(self, target: TargetSet) -> int: ...

    def set_hidden(self, target: TargetSet) -> None: ...

    def set_readonly(self, target: TargetSet) -> None: ...


@dataclass
class MigrationSummary:
    migrated: list[str] = field(default_factory=list)
    read_only: int = 0
    hidden: int = 0

    @property
    def total(self) -> int:
        return len(self.migrated)


class SetMigrator:
    """
    Migrates sets one at a time and stops at the first failure.

    Sets migrated before a failure stay in the target store; there is no
    rollback, and re-running fails on them as duplicates.
    """

    def __init__(self, target: TargetStore, logger: logging.Logger | None = None):
        """
        Args:
            target: Relational store receiving the sets
            logger: Logger for per-set progress
        """
        self.target = target
        self.logger = logger or get_logger(__name__)

    def migrate(self, sets: Sequence[SourceSet]) -> MigrationSummary:
        """
        Migrate every set in order.

        Raises:
            WrongTransformerError: A set's transformer does not compile
            WrongMetadataError: A set's reserved metadata is missing or malformed
            StoreError: The target store rejected a write
        """
        summary = MigrationSummary()
        self.logger.info("migrating sets...", extra={"num": len(sets)})

        for source_set in sets:
            target = self.transfer_set(source_set)
            summary.migrated.append(source_set.name)
            summary.read_only += int(target.read_only)
            summary.hidden += int(target.hidden)

        return summary

    def transfer_set(self, source_set: SourceSet) -> TargetSet:
        """
        Convert and write one set, then apply its lifecycle flags.

        Hidden state is only applied to read-only sets, after read-only.
        """
        fields = {"user": source_set.requester, "set_name": source_set.name}

        try:
            target = convert_set(source_set)
        except (DevkitError, ValidationError) as e:
            self.logger.error("failed to convert set", extra={**fields, "err": str(e)})
            raise

        self.target.create_set(target)

        if source_set.read_only:
            self.target.set_readonly(target)

            if source_set.hide:
                self.target.set_hidden(target)
        elif source_set.hide:
            self.logger.warning(
                "hidden set is not read-only, migrating it visible", extra=fields
            )

        self.logger.info("migrated set", extra={**fields, "set_id": target.id})

        return target
