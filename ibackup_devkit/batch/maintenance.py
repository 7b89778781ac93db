"""
Lifecycle flag maintenance over every set in the key-value store.
"""

from typing import Sequence

from ibackup_devkit.core.flags import (
    HIDDEN,
    READ_ONLY,
    FlagStore,
    OutcomeReporter,
    ToggleResult,
    toggle_flag,
)
from ibackup_devkit.core.models import SourceSet


def update_flags(
    store: FlagStore,
    sets: Sequence[SourceSet],
    reporter: OutcomeReporter,
    lock_all_sets: bool = False,
    hide_read_only: bool = False,
) -> list[ToggleResult]:
    """
    Run the requested flag passes.

    The read-only pass runs first, so sets it locks are hidden by the
    hidden pass of the same call.

    Returns:
        Results of every pass, in the order they ran
    """
    results = []

    if lock_all_sets:
        results.extend(toggle_flag(store, sets, READ_ONLY, reporter))

    if hide_read_only:
        results.extend(toggle_flag(store, sets, HIDDEN, reporter))

    return results
