"""
SourceSet model representing a set as stored in the embedded key-value database.
"""

import hashlib
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SetStatus(str, Enum):
    """Discovery/upload state of a set. Copied verbatim during migration."""

    PENDING_DISCOVERY = "pending_discovery"
    PENDING_UPLOAD = "pending_upload"
    UPLOADING = "uploading"
    FAILING = "failing"
    COMPLETE = "complete"


class SourceSet(BaseModel):
    """
    A named backup job as recorded by the producer in the key-value store.

    Attributes:
        name: Set name (unique per requester)
        requester: User that owns the set
        transformer: Transformer specifier (preset name or "prefix=A:B" rule)
        metadata: Free-form string metadata, including the reserved keys
        monitor_time: Re-discovery interval in seconds (0 disables monitoring)
        monitor_removals: Whether removed local files are tracked
        description: Free text
        delete_local: Whether local files are deleted after upload
        read_only: One-way lock flag
        hide: One-way visibility flag
        error: Last fatal error text
        warning: Last warning text
        status: Discovery/upload state
    """

    name: str = Field(..., min_length=1)
    requester: str = ""
    transformer: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)
    monitor_time: int = Field(0, ge=0)
    monitor_removals: bool = False
    description: str = ""
    delete_local: bool = False
    read_only: bool = False
    hide: bool = False
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

    def id(self) -> str:
        """Stable key derived from requester and name."""
        digest = hashlib.sha256(f"{self.requester}:{self.name}".encode("utf-8"))
        return digest.hexdigest()[:16]

    class Config:
        json_schema_extra = {
            "example": {
                "name": "set-0",
                "requester": "test-user",
                "transformer": "humgen",
                "metadata": {
                    "ibackup:reason": "backup",
                    "ibackup:review": "2025-01-01T00:00:00Z",
                    "ibackup:removal": "2025-06-01T00:00:00Z",
                    "project": "cohort-b",
                },
                "monitor_time": 0,
                "read_only": False,
                "hide": False,
            }
        }
