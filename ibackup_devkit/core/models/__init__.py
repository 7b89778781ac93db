"""
Set models for both sides of the migration.

All models use Pydantic for runtime validation and type safety.
"""

from .source_set import SetStatus, SourceSet
from .target_set import Reason, TargetSet
from .transformer import Transformer

__all__ = [
    "SourceSet",
    "SetStatus",
    "TargetSet",
    "Reason",
    "Transformer",
]
