"""
Extraction of the reserved metadata keys into typed values.

Sets carry free-form string metadata. Three keys are reserved by ibackup and
become typed columns in the relational schema; everything else is residual
metadata copied as-is.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone

from ..exceptions import WrongMetadataError
from ..models import Reason

META_NAMESPACE = "ibackup:"
META_KEY_REASON = META_NAMESPACE + "reason"
META_KEY_REVIEW = META_NAMESPACE + "review"
META_KEY_REMOVAL = META_NAMESPACE + "removal"

RESERVED_META_KEYS = (META_KEY_REASON, META_KEY_REVIEW, META_KEY_REMOVAL)

# RFC 3339: 2025-01-01T00:00:00Z, 2025-01-01T00:00:00.5+01:00
# Fractions beyond microseconds are truncated.
_RFC3339 = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]{1,9})?(Z|[+-][0-9]{2}:[0-9]{2})"
)
_LAYOUTS = ("%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S.%f%z")


@dataclass(frozen=True)
class ReservedMetadata:
    """Typed values of the reserved metadata keys."""

    reason: Reason
    review_date: datetime
    delete_date: datetime


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into a timezone-aware datetime.

    Raises:
        ValueError: If the value is not in the fixed layout
    """
    match = _RFC3339.fullmatch(value)
    if not match:
        raise ValueError(f"cannot parse {value!r} as RFC 3339 timestamp")

    fraction = match.group(1)
    if fraction is None:
        return datetime.strptime(value, _LAYOUTS[0])

    value = value[:match.start(1)] + fraction[:7] + value[match.end(1):]
    return datetime.strptime(value, _LAYOUTS[1])


def format_timestamp(value: datetime) -> str:
    """Format a timezone-aware datetime in the layout parse_timestamp reads."""
    text = value.isoformat()
    if value.utcoffset() == timezone.utc.utcoffset(None):
        text = text.removesuffix("+00:00") + "Z"
    return text


def extract_reserved_metadata(metadata: dict[str, str]) -> ReservedMetadata:
    """
    Parse the reserved keys and remove them from the mapping.

    Keys are checked in the order reason, review, removal and the first
    failure is raised. The mapping is only modified when all three parse.

    Args:
        metadata: Set metadata; modified in place on success

    Returns:
        ReservedMetadata with the typed values

    Raises:
        WrongMetadataError: If a key is missing or its value is malformed
    """
    raw_reason = metadata.get(META_KEY_REASON, "")
    try:
        reason = Reason.parse(raw_reason)
    except ValueError as e:
        raise WrongMetadataError(META_KEY_REASON, raw_reason, str(e)) from e

    review = _parse_date(metadata, META_KEY_REVIEW)
    removal = _parse_date(metadata, META_KEY_REMOVAL)

    for key in RESERVED_META_KEYS:
        metadata.pop(key, None)

    return ReservedMetadata(reason=reason, review_date=review, delete_date=removal)


def _parse_date(metadata: dict[str, str], key: str) -> datetime:
    raw = metadata.get(key, "")
    try:
        return parse_timestamp(raw)
    except ValueError as e:
        raise WrongMetadataError(key, raw, str(e)) from e
