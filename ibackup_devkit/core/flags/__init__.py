"""
Lifecycle flag handling for stored sets.
"""

from .toggler import (
    HIDDEN,
    READ_ONLY,
    FlagSpec,
    FlagStore,
    OutcomeReporter,
    ToggleOutcome,
    ToggleResult,
    toggle_flag,
)

__all__ = [
    "toggle_flag",
    "FlagSpec",
    "FlagStore",
    "READ_ONLY",
    "HIDDEN",
    "OutcomeReporter",
    "ToggleOutcome",
    "ToggleResult",
]
