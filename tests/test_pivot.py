"""Tests for the grouping engine, composite keys and the record wrapper."""

from __future__ import annotations

from collections import Counter, deque
from pathlib import Path
import sys

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.pivot import (
    NULL_KEY,
    Dimension,
    GroupingResult,
    MalformedChainError,
    NamedKey,
    RecordSet,
    ScalarKey,
    TupleKey,
    by_field,
    dimension_values,
    key_of,
    merge_keys,
    pivot,
)

NUMBERS = [1, 2, 3, 4, 5, 6, 7, 8, 9]


# ---------------------------------------------------------------------------
# Key tests


def test_named_key_equality_ignores_entry_order() -> None:
    first = NamedKey((("a", 1), ("b", 2)))
    second = NamedKey((("b", 2), ("a", 1)))
    assert first == second
    assert hash(first) == hash(second)
    assert first.names == ("a", "b")


def test_merge_unnamed_keys_flattens_into_tuple() -> None:
    pair = merge_keys(ScalarKey(True), ScalarKey(False), ("f",), "g")
    assert pair == TupleKey((True, False))
    triple = merge_keys(pair, ScalarKey(3), ("f", "g"), "h")
    assert triple == TupleKey((True, False, 3))


def test_merge_named_keys_overwrites_in_place() -> None:
    old = NamedKey((("a", 1), ("b", 2)))
    merged = merge_keys(old, NamedKey((("a", 9),)), ("a", "b"), "a")
    assert merged.entries == (("a", 9), ("b", 2))


def test_merge_mixed_keys_wraps_positional_side() -> None:
    merged = merge_keys(ScalarKey(True), NamedKey((("even", False),)), ("lt5",), "even")
    assert merged == NamedKey((("lt5", True), ("even", False)))

    merged = merge_keys(NamedKey((("lt5", True),)), ScalarKey(False), ("lt5",), "parity")
    assert merged.entries == (("lt5", True), ("parity", False))


def test_key_of_coerces_plain_lookups() -> None:
    assert key_of(True) == ScalarKey(True)
    assert key_of((True, False)) == TupleKey((True, False))
    assert key_of({"a": 1}) == NamedKey((("a", 1),))
    key = ScalarKey("x")
    assert key_of(key) is key


# ---------------------------------------------------------------------------
# Dimension tests


def test_dimension_values_explode_sequences() -> None:
    assert dimension_values([1, 2]) == [1, 2]
    assert dimension_values((1, 1)) == [1, 1]
    assert dimension_values([]) == [NULL_KEY]
    assert dimension_values("abc") == ["abc"]
    assert dimension_values(None) == [None]


def test_dimension_values_explode_ranges_deques_and_arrays() -> None:
    assert dimension_values(range(3)) == [0, 1, 2]
    assert dimension_values(deque(["a", "b"])) == ["a", "b"]
    assert dimension_values(np.array([1, 2])) == [1, 2]
    assert dimension_values(np.array([[1, 2], [3, 4]])) == [1, 2, 3, 4]
    assert dimension_values(np.array([])) == [NULL_KEY]
    assert sorted(dimension_values(frozenset({2, 1}))) == [1, 2]
    assert dimension_values(b"ab") == [b"ab"]
    assert dimension_values(bytearray(b"ab")) == [bytearray(b"ab")]


def test_array_classifier_files_record_under_each_element() -> None:
    records = [{"id": 1, "tags": np.array(["x", "y"])}, {"id": 2, "tags": np.array(["y"])}]
    result = pivot(records, lambda r: r["tags"], "tag")
    assert {key.get("tag"): [r["id"] for r in bucket] for key, bucket in result.items()} == {
        "x": [1],
        "y": [1, 2],
    }


def test_unnamed_dimension_labels_are_unique_in_chain() -> None:
    first = Dimension.create(lambda i: i)
    second = Dimension.create(lambda i: i, taken=(first.label,))
    assert "<lambda>@test_pivot.py:" in first.label
    assert second.label != first.label


def test_dimension_requires_callable() -> None:
    with pytest.raises(TypeError):
        Dimension.create("size")  # type: ignore[arg-type]


def test_by_field_reads_mappings_and_attributes() -> None:
    class Item:
        color = "green"

    classify = by_field("color")
    assert classify({"color": "brown"}) == "brown"
    assert classify(Item()) == "green"
    assert classify({}) is None


# ---------------------------------------------------------------------------
# Single pivot tests


def test_simple_pivot() -> None:
    data = pivot(NUMBERS, lambda i: i < 5)
    assert isinstance(data, GroupingResult)
    assert data.as_dict() == {True: [1, 2, 3, 4], False: [5, 6, 7, 8, 9]}
    assert data[True] == [1, 2, 3, 4]


def test_named_pivot() -> None:
    data = pivot(NUMBERS, lambda i: i < 5, "a")
    assert data[{"a": True}] == [1, 2, 3, 4]
    assert data[{"a": False}] == [5, 6, 7, 8, 9]
    assert set(data) == {NamedKey((("a", True),)), NamedKey((("a", False),))}


def test_pivot_of_list_values() -> None:
    records = [
        {"name": "one", "list": [1]},
        {"name": "two", "list": [1, 2]},
        {"name": "three", "list": [1, 2, 3]},
        {"name": "four", "list": [1, 2, 3, 4]},
    ]
    data = pivot(records, by_field("list"))
    assert data.as_dict() == {
        1: records,
        2: records[1:],
        3: records[2:],
        4: records[3:],
    }


def test_empty_sequence_files_record_under_null_key() -> None:
    records = [{"tags": []}, {"tags": ["x"]}]
    data = pivot(records, by_field("tags"))
    assert data[NULL_KEY] == [records[0]]
    assert data["x"] == [records[1]]


def test_repeated_values_assign_record_multiple_times() -> None:
    data = pivot(["r"], lambda _: ["a", "a", "b"])
    assert data["a"] == ["r", "r"]
    assert data["b"] == ["r"]


def test_scalar_pivot_preserves_every_record() -> None:
    data = pivot(NUMBERS, lambda i: i % 3)
    regrouped = Counter(record for bucket in data.values() for record in bucket)
    assert regrouped == Counter(NUMBERS)


def test_exploded_record_appears_once_per_element() -> None:
    record = {"tags": ["a", "b", "c"]}
    data = pivot([record, {"tags": ["z"]}], by_field("tags"))
    hits = [key for key, bucket in data.items() if record in bucket]
    assert len(hits) == 3
    assert record not in data["z"]


def test_pivot_of_empty_collection() -> None:
    data = pivot([], lambda i: i)
    assert isinstance(data, GroupingResult)
    assert len(data) == 0


def test_pivot_accepts_generators() -> None:
    data = pivot((i for i in NUMBERS), lambda i: i > 7)
    assert data[True] == [8, 9]


def test_pivot_does_not_mutate_input() -> None:
    records = [{"v": 1}, {"v": 2}]
    snapshot = [dict(record) for record in records]
    pivot(records, by_field("v")).pivot(lambda r: r["v"] > 1)
    assert records == snapshot


def test_buckets_handed_out_are_copies() -> None:
    data = pivot(NUMBERS, lambda i: i < 5)
    data[True].append(100)
    for bucket in data.values():
        bucket.clear()
    assert data[True] == [1, 2, 3, 4]
    assert data.as_dict()[False] == [5, 6, 7, 8, 9]


def test_classifier_errors_propagate() -> None:
    def explode(_: int) -> bool:
        raise KeyError("missing field")

    with pytest.raises(KeyError):
        pivot(NUMBERS, explode)


# ---------------------------------------------------------------------------
# Chained pivot tests


def test_chained_pivots() -> None:
    data = pivot(NUMBERS, lambda i: i < 5).pivot(lambda i: i % 2 == 0)
    assert data.as_dict() == {
        (True, False): [1, 3],
        (True, True): [2, 4],
        (False, False): [5, 7, 9],
        (False, True): [6, 8],
    }


def test_deep_chained_pivots() -> None:
    data = (
        pivot(NUMBERS, lambda i: i < 3)
        .pivot(lambda i: i < 6)
        .pivot(lambda i: i < 9)
        .pivot(lambda i: i % 2 == 0)
        .pivot(lambda i: i % 3 == 0)
    )
    assert data.as_dict() == {
        (True, True, True, False, False): [1],
        (True, True, True, True, False): [2],
        (False, True, True, False, True): [3],
        (False, True, True, False, False): [5],
        (False, True, True, True, False): [4],
        (False, False, True, True, True): [6],
        (False, False, True, True, False): [8],
        (False, False, True, False, False): [7],
        (False, False, False, False, True): [9],
    }
    assert len(data.dimensions) == 5


def test_named_deep_chained_pivots() -> None:
    data = (
        pivot(NUMBERS, lambda i: i < 3, "a")
        .pivot(lambda i: i < 6, "b")
        .pivot(lambda i: i < 9, "c")
        .pivot(lambda i: i % 2 == 0, "d")
        .pivot(lambda i: i % 3 == 0, "e")
    )
    assert data[{"a": True, "b": True, "c": True, "d": False, "e": False}] == [1]
    assert data[{"a": False, "b": False, "c": False, "d": False, "e": True}] == [9]
    assert data[{"e": False, "d": True, "c": True, "b": False, "a": False}] == [8]
    assert all(key.names == ("a", "b", "c", "d", "e") for key in data)


def test_named_chained_pivots() -> None:
    data = pivot(NUMBERS, lambda i: i < 5, "less than 5").pivot(lambda i: i % 2 == 0, "divisible by 2")
    assert data[{"less than 5": True, "divisible by 2": False}] == [1, 3]
    assert data[{"less than 5": True, "divisible by 2": True}] == [2, 4]
    assert data[{"less than 5": False, "divisible by 2": False}] == [5, 7, 9]
    assert data[{"less than 5": False, "divisible by 2": True}] == [6, 8]


def test_chaining_refines_the_previous_grouping() -> None:
    coarse = pivot(NUMBERS, lambda i: i < 5)
    fine = coarse.pivot(lambda i: i % 3)
    for coarse_key, bucket in coarse.items():
        merged = sorted(
            record
            for fine_key, fine_bucket in fine.items()
            if fine_key.parts()[0] == coarse_key.plain()
            for record in fine_bucket
        )
        assert merged == sorted(bucket)


def test_mixed_named_and_unnamed_chain_yields_named_keys() -> None:
    parity = lambda i: i % 2 == 0  # noqa: E731
    data = pivot(NUMBERS, lambda i: i < 5, "lt5").pivot(parity)
    assert all(isinstance(key, NamedKey) for key in data)
    label = data.labels[1]
    assert data[{"lt5": True, label: True}] == [2, 4]

    data = pivot(NUMBERS, parity).pivot(lambda i: i < 5, "lt5")
    assert data[{data.labels[0]: False, "lt5": False}] == [5, 7, 9]


def test_reused_name_folds_buckets_without_losing_records() -> None:
    data = pivot(NUMBERS, lambda i: i < 5, "a").pivot(lambda i: i % 2 == 0, "a")
    assert sorted(data[{"a": True}]) == [2, 4, 6, 8]
    assert sorted(data[{"a": False}]) == [1, 3, 5, 7, 9]


def test_pivot_on_untagged_mapping_is_a_no_op() -> None:
    plain = {True: [1, 2]}
    assert pivot(plain, lambda i: i > 1) is plain


def test_pivot_on_untagged_mapping_strict_raises() -> None:
    with pytest.raises(MalformedChainError):
        pivot({True: [1]}, lambda i: i, strict=True)


# ---------------------------------------------------------------------------
# RecordSet tests


def test_record_set_snapshots_and_pivots() -> None:
    source = list(NUMBERS)
    records = RecordSet(source)
    source.append(10)
    assert len(records) == 9
    data = records.pivot(lambda i: i < 5).pivot(lambda i: i % 2 == 0)
    assert data[(False, True)] == [6, 8]
    assert list(records) == NUMBERS
