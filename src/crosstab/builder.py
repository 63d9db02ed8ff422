"""Reshape a two-dimension grouping into a cross-tab with totals."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, TypeVar, Union

from src.pivot.errors import MalformedChainError
from src.pivot.grouping import GroupingResult
from src.pivot.keys import NamedKey

from .aggregators import Aggregators, CellAggregator, TotalAggregator
from .config import CrossTabConfig
from .table import CellIndex, CrossTab

SourceT = TypeVar("SourceT")


def header_label(value: Any) -> str:
    """Headers are the string form of dimension values."""
    return str(value)


def is_two_dimensional(result: Any) -> bool:
    """True when `result` is non-empty and comes from exactly two pivots keyed by name."""
    if not isinstance(result, GroupingResult) or len(result.dimensions) != 2 or not result:
        return False
    return all(isinstance(key, NamedKey) and len(key) == 2 for key in result)


def build_crosstab(
    result: GroupingResult,
    label: str = "",
    aggregators: Optional[Aggregators] = None,
    config: Optional[CrossTabConfig] = None,
) -> CrossTab:
    """Build the cross-tab; columns come from the first pivot, rows from the second."""
    config = config or CrossTabConfig()
    config.validate()
    aggregators = aggregators or Aggregators()
    if not is_two_dimensional(result):
        raise MalformedChainError(
            "Cross-tabs need a grouping built from exactly two named pivots; "
            f"received {result!r}."
        )

    col_dimension, row_dimension = result.labels
    col_values: set[str] = set()
    row_values: set[str] = set()
    buckets: Dict[CellIndex, List[Any]] = {}
    for key, bucket in result.items():
        (_, col_value), (_, row_value) = key.entries
        col, row = header_label(col_value), header_label(row_value)
        col_values.add(col)
        row_values.add(row)
        if (row, col) in buckets:
            # Distinct values with the same string form share one cell.
            buckets[(row, col)] = buckets[(row, col)] + list(bucket)
        else:
            buckets[(row, col)] = list(bucket)

    col_headers: Tuple[str, ...] = tuple(sorted(col_values))
    row_headers: Tuple[str, ...] = tuple(sorted(row_values))
    cells = {index: aggregators.aggregate_cell(bucket) for index, bucket in buckets.items()}

    row_totals = {
        row: aggregators.aggregate_row([cells.get((row, col)) for col in col_headers]) for row in row_headers
    }
    col_totals = {
        col: aggregators.aggregate_column([cells.get((row, col)) for row in row_headers]) for col in col_headers
    }
    grand_total = aggregators.aggregate_grand([row_totals[row] for row in row_headers])

    return CrossTab(
        label=label,
        row_dimension=row_dimension,
        col_dimension=col_dimension,
        row_headers=row_headers,
        col_headers=col_headers,
        cells=cells,
        row_totals=row_totals,
        col_totals=col_totals,
        grand_total=grand_total,
        config=config,
    )


def to_2d(
    result: SourceT,
    label: str = "",
    *,
    cell: Optional[CellAggregator] = None,
    row_total: Optional[TotalAggregator] = None,
    col_total: Optional[TotalAggregator] = None,
    grand_total: Optional[TotalAggregator] = None,
    config: Optional[CrossTabConfig] = None,
) -> Union[List[List[Any]], SourceT]:
    """Render `result` as rows: header, one row per row value, then totals.

    Input that is not a non-empty two-dimension named grouping is returned
    unchanged, unless `config.strict` is set.
    """
    config = config or CrossTabConfig()
    if not is_two_dimensional(result):
        if config.strict:
            raise MalformedChainError("to_2d() requires exactly two chained named pivots.")
        return result
    aggregators = Aggregators(cell=cell, row_total=row_total, col_total=col_total, grand_total=grand_total)
    return build_crosstab(result, label, aggregators=aggregators, config=config).rows()  # type: ignore[arg-type]


__all__ = ["build_crosstab", "header_label", "is_two_dimensional", "to_2d"]
