"""
TargetSet model representing a set in the relational schema.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from .source_set import SetStatus
from .transformer import Transformer


class Reason(str, Enum):
    """Why a set is being backed up. Closed set of recognised values."""

    BACKUP = "backup"
    ARCHIVE = "archive"
    QUARANTINE = "quarantine"

    @classmethod
    def parse(cls, value: str) -> "Reason":
        """
        Parse a reason string.

        Raises:
            ValueError: If the value is not a recognised reason
        """
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(r.value for r in cls)
            raise ValueError(f"invalid reason {value!r}, expected one of: {allowed}")


class TargetSet(BaseModel):
    """
    Typed counterpart of a SourceSet, written once per migration run.

    hidden and read_only reflect what the store holds; they are changed only
    through SetRepository.set_hidden / set_readonly, never on create.

    Attributes:
        id: Row id assigned by the target store on creation
        reason: Parsed from the reserved reason metadata key
        review_date: Parsed from the reserved review metadata key
        delete_date: Parsed from the reserved removal metadata key
        transformer: Compiled path-rewrite rule
        metadata: Residual metadata with the reserved keys removed
    """

    id: int | None = None
    name: str = Field(..., min_length=1)
    requester: str = ""
    transformer: Transformer
    reason: Reason
    review_date: datetime
    delete_date: datetime
    metadata: dict[str, str] = Field(default_factory=dict)
    monitor_time: int = Field(0, ge=0)
    monitor_removals: bool = False
    description: str = ""
    delete_local: bool = False
    error: str = ""
    warning: str = ""
    status: SetStatus = SetStatus.PENDING_DISCOVERY
    started_discovery: datetime | None = None
    last_discovery: datetime | None = None
    last_completed: datetime | None = None
    last_completed_count: int = Field(0, ge=0)
    last_completed_size: int = Field(0, ge=0)
    size_uploaded: int = Field(0, ge=0)
    size_removed: int = Field(0, ge=0)
    num_objects_to_be_removed: int = Field(0, ge=0)
    num_objects_removed: int = Field(0, ge=0)
    hidden: bool = False
    read_only: bool = False

    @field_validator("review_date", "delete_date")
    @classmethod
    def check_timezone_aware(cls, v: datetime) -> datetime:
        """Review and delete dates must carry a UTC offset."""
        if v.tzinfo is None:
            raise ValueError("date must be timezone aware")
        return v
