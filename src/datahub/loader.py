from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, cast

import pandas as pd

RecordFormat = Literal["csv", "json", "jsonl"]
SUFFIX_FORMATS: Dict[str, RecordFormat] = {
    ".csv": "csv",
    ".json": "json",
    ".jsonl": "jsonl",
    ".ndjson": "jsonl",
}


def infer_format(path: Path) -> RecordFormat:
    """Pick a record format from the file suffix."""
    fmt = SUFFIX_FORMATS.get(path.suffix.lower())
    if fmt is None:
        supported = ", ".join(sorted(SUFFIX_FORMATS))
        raise ValueError(f"Cannot infer record format for {path.name}; expected one of {supported}.")
    return fmt


def load_records(path: Path, fmt: Optional[RecordFormat] = None) -> List[Dict[str, Any]]:
    """Read a flat file into a list of dict records; missing values become None."""
    fmt = fmt or infer_format(path)
    if fmt == "csv":
        frame = pd.read_csv(path)
    elif fmt in ("json", "jsonl"):
        frame = pd.read_json(path, lines=fmt == "jsonl", orient="records", dtype=False, convert_dates=False)
    else:
        raise ValueError(f"Unknown record format '{fmt}'")

    frame = frame.astype(object)
    frame = frame.where(pd.notna(frame), None)
    return cast(List[Dict[str, Any]], frame.to_dict(orient="records"))


__all__ = ["RecordFormat", "infer_format", "load_records"]
