"""
Embedded key-value store holding pre-migration sets.
"""

from .source_store import SourceStore

__all__ = ["SourceStore"]
