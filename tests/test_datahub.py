"""Tests for the record loaders and multi-value helpers."""

from __future__ import annotations

import json
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.datahub import ensure_mapping, infer_format, load_records, safe_sequence, split_multi_values
from src.pivot import by_field, pivot


# ---------------------------------------------------------------------------
# Helper tests


def test_safe_sequence_variants() -> None:
    assert safe_sequence(None) == []
    assert safe_sequence("a; b ;") == ["a", "b"]
    assert safe_sequence(["x", "y"]) == ["x", "y"]
    assert safe_sequence(3) == [3]
    assert safe_sequence("a|b", separator="|") == ["a", "b"]


def test_ensure_mapping_rejects_other_rows() -> None:
    assert ensure_mapping({"a": 1}) == {"a": 1}
    with pytest.raises(TypeError):
        ensure_mapping(["a", 1])


def test_split_multi_values_copies_records() -> None:
    records = [{"tags": "red;blue", "n": 1}, {"tags": None, "n": 2}]
    expanded = split_multi_values(records, ["tags", "absent"])
    assert expanded == [{"tags": ["red", "blue"], "n": 1}, {"tags": [], "n": 2}]
    assert records[0]["tags"] == "red;blue"


def test_split_multi_values_requires_separator() -> None:
    with pytest.raises(ValueError):
        split_multi_values([], ["tags"], separator="")


def test_split_values_explode_when_pivoted() -> None:
    records = split_multi_values([{"tags": "a;b"}, {"tags": ""}], ["tags"])
    data = pivot(records, by_field("tags"))
    assert set(data.as_dict()) == {"a", "b", None}


# ---------------------------------------------------------------------------
# Loader tests


def test_infer_format_from_suffix() -> None:
    assert infer_format(Path("items.CSV")) == "csv"
    assert infer_format(Path("items.ndjson")) == "jsonl"
    with pytest.raises(ValueError):
        infer_format(Path("items.parquet"))


def test_load_csv_records(tmp_path: Path) -> None:
    path = tmp_path / "produce.csv"
    path.write_text("name,size,sales\nnut,small,3\nmelon,,4\n", encoding="utf-8")
    records = load_records(path)
    assert records == [
        {"name": "nut", "size": "small", "sales": 3},
        {"name": "melon", "size": None, "sales": 4},
    ]


def test_load_json_records(tmp_path: Path) -> None:
    path = tmp_path / "produce.json"
    payload = [{"name": "nut", "tags": ["a", "b"]}, {"name": "bean", "tags": []}]
    path.write_text(json.dumps(payload), encoding="utf-8")
    records = load_records(path)
    assert [record["name"] for record in records] == ["nut", "bean"]
    assert list(records[0]["tags"]) == ["a", "b"]


def test_load_jsonl_records_with_explicit_format(tmp_path: Path) -> None:
    path = tmp_path / "produce.txt"
    path.write_text('{"name": "nut", "sales": 3}\n{"name": "bean", "sales": 10}\n', encoding="utf-8")
    records = load_records(path, "jsonl")
    assert records == [{"name": "nut", "sales": 3}, {"name": "bean", "sales": 10}]
