"""
Maps key-value store sets onto the relational set model.
"""

from ..models import SourceSet, TargetSet
from .metadata import extract_reserved_metadata
from .transformer_compiler import compile_transformer

# Fields with identical meaning on both sides, copied without conversion.
COPIED_FIELDS = (
    "name",
    "requester",
    "monitor_time",
    "monitor_removals",
    "description",
    "delete_local",
    "error",
    "warning",
    "status",
    "started_discovery",
    "last_discovery",
    "last_completed",
    "last_completed_count",
    "last_completed_size",
    "size_uploaded",
    "size_removed",
    "num_objects_to_be_removed",
    "num_objects_removed",
)


def convert_set(source: SourceSet) -> TargetSet:
    """
    Build the relational representation of a set.

    The source set is not modified: reserved keys are removed from a copy of
    its metadata, and nothing is written anywhere.

    Args:
        source: Set read from the key-value store

    Returns:
        TargetSet ready for SetRepository.create_set

    Raises:
        WrongTransformerError: If the transformer specifier does not compile
        WrongMetadataError: If a reserved metadata key is missing or malformed
    """
    transformer = compile_transformer(source.transformer)

    metadata = dict(source.metadata)
    reserved = extract_reserved_metadata(metadata)

    fields = {name: getattr(source, name) for name in COPIED_FIELDS}

    return TargetSet(
        transformer=transformer,
        reason=reserved.reason,
        review_date=reserved.review_date,
        delete_date=reserved.delete_date,
        metadata=metadata,
        **fields,
    )
