"""Cell and total aggregators for cross-tab tables."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

import numpy as np

CellAggregator = Callable[[Sequence[Any]], Any]
TotalAggregator = Callable[[Sequence[Any]], Any]


def to_count(value: Any) -> int:
    """Coerce a cell value to an integer, treating anything non-integral as 0."""
    if value is None or isinstance(value, (bool, np.bool_)):
        return 0
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    if isinstance(value, (bytes, bytearray)):
        return 0
    if isinstance(value, Sequence):
        return len(value)
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        as_float = float(value)
        if np.isfinite(as_float) and as_float.is_integer():
            return int(as_float)
    return 0


def count_fold(values: Sequence[Any]) -> int:
    """Default total: sum of `to_count` over a row or column (absent cells add 0)."""
    return sum(to_count(value) for value in values)


def count(bucket: Sequence[Any]) -> int:
    """Cell aggregator returning the number of records in the bucket."""
    return len(bucket)


def sum_of(field: str) -> CellAggregator:
    """Cell aggregator summing `field` over the records of a bucket."""

    def aggregate(bucket: Sequence[Any]) -> Any:
        total: Any = 0
        for record in bucket:
            value = record.get(field) if isinstance(record, Mapping) else getattr(record, field, None)
            if value is not None:
                total += value
        return total

    aggregate.__name__ = aggregate.__qualname__ = f"sum_of({field!r})"
    return aggregate


def total_of(values: Sequence[Any]) -> Any:
    """Numeric total over a row or column of summed cells; absent cells are skipped."""
    return sum(value for value in values if value is not None)


@dataclass(frozen=True)
class Aggregators:
    """Pluggable functions for cell values and the three kinds of totals.

    Unset cell aggregator keeps the raw bucket; unset totals fall back to
    `count_fold`. The grand total defaults to the column-total aggregator run
    over the row-totals column.
    """

    cell: Optional[CellAggregator] = None
    row_total: Optional[TotalAggregator] = None
    col_total: Optional[TotalAggregator] = None
    grand_total: Optional[TotalAggregator] = None

    def aggregate_cell(self, bucket: Sequence[Any]) -> Any:
        return self.cell(bucket) if self.cell is not None else bucket

    def aggregate_row(self, values: Sequence[Any]) -> Any:
        return (self.row_total or count_fold)(values)

    def aggregate_column(self, values: Sequence[Any]) -> Any:
        return (self.col_total or count_fold)(values)

    def aggregate_grand(self, row_totals: Sequence[Any]) -> Any:
        return (self.grand_total or self.col_total or count_fold)(row_totals)


__all__ = [
    "Aggregators",
    "CellAggregator",
    "TotalAggregator",
    "count",
    "count_fold",
    "sum_of",
    "to_count",
    "total_of",
]
