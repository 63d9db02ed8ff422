"""Wrapper exposing pivot operations on a fixed collection of records."""

from __future__ import annotations

from typing import Generic, Iterable, Iterator, Optional, Tuple, TypeVar

from .dimensions import Classifier, Dimension
from .grouping import GroupingResult

RecordT = TypeVar("RecordT")


class RecordSet(Generic[RecordT]):
    """Snapshot of a collection that can be pivoted repeatedly."""

    def __init__(self, records: Iterable[RecordT]) -> None:
        self._records: Tuple[RecordT, ...] = tuple(records)

    def pivot(self, classify: Classifier, name: Optional[str] = None) -> GroupingResult:
        return GroupingResult.from_records(self._records, Dimension.create(classify, name))

    def __iter__(self) -> Iterator[RecordT]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"RecordSet({len(self._records)} records)"


__all__ = ["RecordSet"]
