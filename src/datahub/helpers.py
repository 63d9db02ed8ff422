from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence


def ensure_mapping(row: Any) -> Mapping[str, Any]:
    """Guarantee loaded rows behave like mappings."""
    if isinstance(row, Mapping):
        return row
    raise TypeError(f"Unexpected row type: {type(row)}")


def safe_sequence(value: Any, separator: str = ";") -> List[Any]:
    """Return a list even when the source is None, a delimited string or a scalar."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        return [part.strip() for part in value.split(separator) if part.strip()]
    return [value]


def split_multi_values(
    records: Iterable[Mapping[str, Any]],
    fields: Sequence[str],
    separator: str = ";",
) -> List[Dict[str, Any]]:
    """Copy records, turning each of `fields` into a list so pivots explode it."""
    if not separator:
        raise ValueError("Separator must be a non-empty string.")
    expanded: List[Dict[str, Any]] = []
    for record in records:
        row = dict(ensure_mapping(record))
        for field in fields:
            if field in row:
                row[field] = safe_sequence(row[field], separator)
        expanded.append(row)
    return expanded
