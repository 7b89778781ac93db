"""
Set transformation for the key-value to relational migration.
"""

from .mapper import convert_set
from .metadata import (
    META_KEY_REASON,
    META_KEY_REMOVAL,
    META_KEY_REVIEW,
    RESERVED_META_KEYS,
    ReservedMetadata,
    extract_reserved_metadata,
    format_timestamp,
    parse_timestamp,
)
from .transformer_compiler import TRANSFORMER_PRESETS, compile_transformer

__all__ = [
    "convert_set",
    "compile_transformer",
    "TRANSFORMER_PRESETS",
    "extract_reserved_metadata",
    "ReservedMetadata",
    "parse_timestamp",
    "format_timestamp",
    "META_KEY_REASON",
    "META_KEY_REVIEW",
    "META_KEY_REMOVAL",
    "RESERVED_META_KEYS",
]
