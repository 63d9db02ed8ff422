"""Pivot engine: group records into buckets keyed by one or more classifiers."""

from .dimensions import Dimension, by_field, dimension_values
from .errors import MalformedChainError, PivotError
from .grouping import Bucket, GroupingResult, pivot
from .keys import NULL_KEY, GroupKey, NamedKey, ScalarKey, TupleKey, key_of, merge_keys
from .records import RecordSet

__all__ = [
    "Bucket",
    "Dimension",
    "GroupKey",
    "GroupingResult",
    "MalformedChainError",
    "NULL_KEY",
    "NamedKey",
    "PivotError",
    "RecordSet",
    "ScalarKey",
    "TupleKey",
    "by_field",
    "dimension_values",
    "key_of",
    "merge_keys",
    "pivot",
]
