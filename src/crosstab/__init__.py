"""Cross-tab builder: flatten a two-dimension grouping into a table with totals."""

from .aggregators import Aggregators, count, count_fold, sum_of, to_count, total_of
from .builder import build_crosstab, header_label, is_two_dimensional, to_2d
from .config import CrossTabConfig
from .table import CrossTab

__all__ = [
    "Aggregators",
    "CrossTab",
    "CrossTabConfig",
    "build_crosstab",
    "count",
    "count_fold",
    "header_label",
    "is_two_dimensional",
    "sum_of",
    "to_2d",
    "to_count",
    "total_of",
]
