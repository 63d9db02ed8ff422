"""Grouping engine: bucket records by classifier output and chain further passes."""

from __future__ import annotations

from collections import defaultdict
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from .dimensions import Classifier, Dimension
from .errors import MalformedChainError
from .keys import GroupKey, NamedKey, ScalarKey, key_of, merge_keys

if TYPE_CHECKING:
    from src.crosstab.aggregators import Aggregators
    from src.crosstab.config import CrossTabConfig
    from src.crosstab.table import CrossTab

RecordT = TypeVar("RecordT")
Bucket = List[Any]
SourceT = TypeVar("SourceT", bound=Mapping)


def _bucketize(records: Iterable[Any], dimension: Dimension) -> Dict[GroupKey, Bucket]:
    """Single pass: file every record under each value its classifier yields."""
    buckets: Dict[GroupKey, Bucket] = defaultdict(list)
    for record in records:
        for value in dimension.values_for(record):
            key: GroupKey = NamedKey(((dimension.label, value),)) if dimension.named else ScalarKey(value)
            buckets[key].append(record)
    return dict(buckets)


class GroupingResult(Mapping[GroupKey, Bucket]):
    """Read-only mapping from composite key to bucket, produced by `pivot`.

    Only instances of this type can be chained or turned into a cross-tab.
    Each pass returns a new instance; buckets share record references with the
    input collection. Chaining the same instance from several threads is not
    supported: the caller that chains owns the instance.
    """

    def __init__(self, buckets: Mapping[GroupKey, Bucket], dimensions: Sequence[Dimension]) -> None:
        self._buckets: Dict[GroupKey, Bucket] = dict(buckets)
        self._dimensions: Tuple[Dimension, ...] = tuple(dimensions)

    @classmethod
    def from_records(cls, records: Iterable[Any], dimension: Dimension) -> "GroupingResult":
        if records is None:
            raise TypeError("Cannot pivot None; pass an iterable of records.")
        return cls(_bucketize(records, dimension), (dimension,))

    @property
    def dimensions(self) -> Tuple[Dimension, ...]:
        return self._dimensions

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(dimension.label for dimension in self._dimensions)

    def pivot(self, classify: Classifier, name: Optional[str] = None) -> "GroupingResult":
        """Split every bucket by `classify`, extending each key with the new value."""
        dimension = Dimension.create(classify, name, taken=self.labels)
        old_labels = self.labels
        buckets: Dict[GroupKey, Bucket] = {}
        for old_key, bucket in self._buckets.items():
            for sub_key, sub_bucket in _bucketize(bucket, dimension).items():
                new_key = merge_keys(old_key, sub_key, old_labels, dimension.label)
                existing = buckets.get(new_key)
                if existing is None:
                    buckets[new_key] = sub_bucket
                else:
                    # Reused dimension names can fold separate buckets together.
                    existing.extend(sub_bucket)
        return GroupingResult(buckets, self._dimensions + (dimension,))

    def crosstab(
        self,
        label: str = "",
        aggregators: Optional["Aggregators"] = None,
        config: Optional["CrossTabConfig"] = None,
    ) -> "CrossTab":
        from src.crosstab.builder import build_crosstab

        return build_crosstab(self, label, aggregators=aggregators, config=config)

    def to_2d(self, label: str = "", **kwargs: Any) -> Union[List[List[Any]], "GroupingResult"]:
        from src.crosstab.builder import to_2d

        return to_2d(self, label, **kwargs)

    def as_dict(self) -> Dict[Any, Bucket]:
        """Copy of the buckets keyed by plain values, tuples or (name, value) pairs."""
        return {key.plain(): list(bucket) for key, bucket in self._buckets.items()}

    def __getitem__(self, key: Any) -> Bucket:
        # Stored buckets are never handed out.
        return list(self._buckets[key_of(key)])

    def __contains__(self, key: object) -> bool:
        try:
            return key_of(key) in self._buckets
        except TypeError:
            return False

    def __iter__(self) -> Iterator[GroupKey]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        return f"GroupingResult(dimensions={list(self.labels)!r}, buckets={len(self._buckets)})"


def pivot(
    source: Union[Iterable[RecordT], GroupingResult, SourceT],
    classify: Classifier,
    name: Optional[str] = None,
    *,
    strict: bool = False,
) -> Union[GroupingResult, SourceT]:
    """Group `source` by `classify`.

    A `GroupingResult` is chained; any other mapping is returned untouched
    unless `strict` is set, in which case `MalformedChainError` is raised.
    Everything else is treated as a collection of records.
    """
    if isinstance(source, GroupingResult):
        return source.pivot(classify, name)
    if isinstance(source, Mapping):
        if strict:
            raise MalformedChainError("Only results produced by pivot() can be pivoted further.")
        return source
    return GroupingResult.from_records(source, Dimension.create(classify, name))


__all__ = ["Bucket", "GroupingResult", "pivot"]
