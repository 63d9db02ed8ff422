"""Materialized two-dimensional cross-tab."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Tuple

import pandas as pd

from .config import CrossTabConfig

CellIndex = Tuple[str, str]


@dataclass(frozen=True)
class CrossTab:
    """Row/column table with totals derived from a two-dimension grouping."""

    label: str
    row_dimension: str
    col_dimension: str
    row_headers: Tuple[str, ...]
    col_headers: Tuple[str, ...]
    cells: Mapping[CellIndex, Any]
    row_totals: Mapping[str, Any]
    col_totals: Mapping[str, Any]
    grand_total: Any
    config: CrossTabConfig = field(default_factory=CrossTabConfig)

    @property
    def corner(self) -> str:
        return self.config.corner_label(self.row_dimension, self.col_dimension)

    @property
    def total_label(self) -> str:
        return self.config.total_label(self.label)

    def cell(self, row: str, col: str) -> Any:
        """Cell value, or None when the combination never occurred."""
        return self.cells.get((row, col))

    def rows(self) -> List[List[Any]]:
        """Header row, one row per row header, then the totals row."""
        table: List[List[Any]] = [[self.corner, *self.col_headers, self.total_label]]
        for row in self.row_headers:
            table.append([row, *(self.cell(row, col) for col in self.col_headers), self.row_totals[row]])
        table.append([self.total_label, *(self.col_totals[col] for col in self.col_headers), self.grand_total])
        return table

    def to_frame(self) -> pd.DataFrame:
        """Table body as a DataFrame; object dtype keeps absent cells as None."""
        header, *body = self.rows()
        frame = pd.DataFrame(
            [row[1:] for row in body],
            index=[row[0] for row in body],
            columns=header[1:],
            dtype=object,
        )
        frame.index.name = self.corner
        return frame


__all__ = ["CellIndex", "CrossTab"]
