"""Plotting utilities for cross-tab results."""

from .crosstab_heatmap import crosstab_matrix, plot_crosstab
from .save_config import PlotSaveConfig, PlotSaveDestinations

__all__ = [
    "crosstab_matrix",
    "plot_crosstab",
    "PlotSaveConfig",
    "PlotSaveDestinations",
]
