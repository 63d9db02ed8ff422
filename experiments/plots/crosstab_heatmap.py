"""Heatmap of cross-tab cell values."""

from __future__ import annotations

from typing import Optional

import numpy as np
import plotly.express as px
import plotly.graph_objects as go

from src.crosstab import CrossTab, to_count
from .save_config import PlotSaveDestinations


def crosstab_matrix(table: CrossTab) -> np.ndarray:
    """Cells as a rows x columns integer matrix; absent cells are 0."""
    matrix = np.zeros((len(table.row_headers), len(table.col_headers)), dtype=int)
    for i, row in enumerate(table.row_headers):
        for j, col in enumerate(table.col_headers):
            matrix[i, j] = to_count(table.cell(row, col))
    return matrix


def plot_crosstab(
    table: CrossTab,
    title: Optional[str] = None,
    save_to: Optional[PlotSaveDestinations] = None,
) -> go.Figure:
    """Render the cross-tab body (totals excluded) as an annotated heatmap."""
    fig = px.imshow(
        crosstab_matrix(table),
        x=list(table.col_headers),
        y=list(table.row_headers),
        text_auto=True,
        aspect="auto",
        color_continuous_scale="Blues",
        labels={"x": table.col_dimension, "y": table.row_dimension, "color": table.label or "value"},
        title=title or f"{table.row_dimension} by {table.col_dimension} ({table.total_label} = {table.grand_total})",
    )

    if save_to:
        save_to.ensure_dir()
        if save_to.save_static:
            fig.write_image(str(save_to.png_path), engine="kaleido")
        if save_to.save_html:
            fig.write_html(str(save_to.html_path), include_plotlyjs="cdn", full_html=True)
    else:
        fig.show()
    return fig


__all__ = ["crosstab_matrix", "plot_crosstab"]
