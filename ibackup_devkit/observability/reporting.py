"""
Log-backed reporter for toggle outcomes.
"""

import logging

from ibackup_devkit.core.flags import OutcomeReporter, ToggleOutcome, ToggleResult

from .logger import get_logger


class LoggingReporter(OutcomeReporter):
    """Writes one log line per set, identified by requester, name and id."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or get_logger(__name__)

    def starting(self, total: int, property_name: str) -> None:
        self.logger.info(
            "updating sets...", extra={"num": total, "property": property_name}
        )

    def report(self, result: ToggleResult) -> None:
        s = result.source_set
        fields = {"user": s.requester, "set_name": s.name, "set_id": s.id()}

        if result.outcome is ToggleOutcome.PERSISTED:
            self.logger.info("updated set", extra=fields)
        elif result.outcome is ToggleOutcome.PERSIST_FAILED:
            self.logger.error("failed to update set", extra={**fields, "err": str(result.error)})
        else:
            self.logger.info("skipping set", extra={**fields, "reason": result.reason})
