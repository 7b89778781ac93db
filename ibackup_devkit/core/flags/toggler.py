"""
One-way lifecycle flag toggling over a batch of sets.

The same loop serves every flag. A FlagSpec names the attribute to set and
how to persist it, with an optional filter for sets that must be left alone.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol, Sequence

from ..exceptions import StoreError
from ..models import SourceSet


class FlagStore(Protocol):
    """Store operations the toggler persists through."""

    def add_or_update(self, source_set: SourceSet) -> None: ...

    def hide(self, source_set: SourceSet) -> None: ...


class ToggleOutcome(str, Enum):
    PERSISTED = "persisted"
    PERSIST_FAILED = "persist_failed"
    SKIP_FILTERED = "skip_filtered"
    SKIP_ALREADY_SET = "skip_already_set"


@dataclass(frozen=True)
class ToggleResult:
    """Terminal state of one set after a toggle pass."""

    source_set: SourceSet
    property_name: str
    outcome: ToggleOutcome
    reason: str | None = None
    error: Exception | None = None


class OutcomeReporter(ABC):
    """Receives per-set outcomes of a toggle pass."""

    @abstractmethod
    def starting(self, total: int, property_name: str) -> None:
        pass

    @abstractmethod
    def report(self, result: ToggleResult) -> None:
        pass


@dataclass(frozen=True)
class FlagSpec:
    """
    A boolean lifecycle flag the toggler can set.

    Attributes:
        property_name: Human-readable name used in reports
        attribute: SourceSet attribute holding the flag
        persist: Store call writing a set with the flag already set
        skip_reason: Returns why a set must not be touched, or None
    """

    property_name: str
    attribute: str
    persist: Callable[[FlagStore, SourceSet], None]
    skip_reason: Callable[[SourceSet], str | None] = lambda source_set: None


def _not_read_only(source_set: SourceSet) -> str | None:
    return None if source_set.read_only else "not read-only"


READ_ONLY = FlagSpec(
    property_name="read-only",
    attribute="read_only",
    persist=lambda store, source_set: store.add_or_update(source_set),
)

HIDDEN = FlagSpec(
    property_name="hidden",
    attribute="hide",
    persist=lambda store, source_set: store.hide(source_set),
    skip_reason=_not_read_only,
)


def toggle_flag(
    store: FlagStore,
    sets: Sequence[SourceSet],
    flag: FlagSpec,
    reporter: OutcomeReporter,
) -> list[ToggleResult]:
    """
    Set a flag to true on every eligible set, persisting each one separately.

    The in-memory set is only updated once its store write succeeded, so a
    failed write leaves it as it was. A failure never stops the batch.

    Args:
        store: Store the changed sets are written to
        sets: Sets to process, in order
        flag: Flag to set
        reporter: Receives every outcome

    Returns:
        One ToggleResult per set, in input order
    """
    reporter.starting(len(sets), flag.property_name)
    results = []

    for source_set in sets:
        result = _toggle_one(store, source_set, flag)
        reporter.report(result)
        results.append(result)

    return results


def _toggle_one(store: FlagStore, source_set: SourceSet, flag: FlagSpec) -> ToggleResult:
    reason = flag.skip_reason(source_set)
    if reason is not None:
        return ToggleResult(source_set, flag.property_name, ToggleOutcome.SKIP_FILTERED, reason)

    if getattr(source_set, flag.attribute):
        return ToggleResult(
            source_set, flag.property_name, ToggleOutcome.SKIP_ALREADY_SET, "already done"
        )

    candidate = source_set.model_copy(update={flag.attribute: True})
    try:
        flag.persist(store, candidate)
    except StoreError as e:
        return ToggleResult(
            source_set, flag.property_name, ToggleOutcome.PERSIST_FAILED, error=e
        )

    setattr(source_set, flag.attribute, True)

    return ToggleResult(source_set, flag.property_name, ToggleOutcome.PERSISTED)
