from .helpers import ensure_mapping, safe_sequence, split_multi_values
from .loader import RecordFormat, infer_format, load_records

__all__ = [
    "RecordFormat",
    "ensure_mapping",
    "infer_format",
    "load_records",
    "safe_sequence",
    "split_multi_values",
]
