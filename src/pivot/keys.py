"""Composite group keys produced by pivot passes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterator, Mapping, Sequence, Tuple, Union

# Bucket key used when a classifier returns an empty sequence.
NULL_KEY = None


@dataclass(frozen=True)
class ScalarKey:
    """Key of a single unnamed pivot pass."""

    value: Hashable

    def parts(self) -> Tuple[Hashable, ...]:
        return (self.value,)

    def plain(self) -> Any:
        return self.value


@dataclass(frozen=True)
class TupleKey:
    """Positional key built by chaining unnamed pivots."""

    values: Tuple[Hashable, ...]

    def parts(self) -> Tuple[Hashable, ...]:
        return self.values

    def plain(self) -> Any:
        return self.values

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True, eq=False)
class NamedKey:
    """Key of named pivots; entries keep the order the dimensions were introduced.

    Equality and hashing ignore entry order, so the key behaves like a mapping
    from dimension name to value.
    """

    entries: Tuple[Tuple[str, Hashable], ...]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Hashable]) -> "NamedKey":
        return cls(tuple(mapping.items()))

    def merge(self, other: "NamedKey") -> "NamedKey":
        """Return a key holding both entry sets; names in `other` overwrite in place."""
        merged: Dict[str, Hashable] = dict(self.entries)
        merged.update(other.entries)
        return NamedKey(tuple(merged.items()))

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.entries)

    def get(self, name: str, default: Any = None) -> Any:
        for entry_name, value in self.entries:
            if entry_name == name:
                return value
        return default

    def as_dict(self) -> Dict[str, Hashable]:
        return dict(self.entries)

    def plain(self) -> Any:
        return self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Tuple[str, Hashable]]:
        return iter(self.entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NamedKey):
            return NotImplemented
        return dict(self.entries) == dict(other.entries)

    def __hash__(self) -> int:
        return hash(frozenset(self.entries))

    def __repr__(self) -> str:
        return f"NamedKey({dict(self.entries)!r})"


GroupKey = Union[ScalarKey, TupleKey, NamedKey]


def as_named(key: GroupKey, labels: Sequence[str]) -> NamedKey:
    """Wrap a positional key with the labels of the dimensions that produced it."""
    if isinstance(key, NamedKey):
        return key
    parts = key.parts()
    if len(labels) < len(parts):
        raise ValueError(f"Cannot label {len(parts)} key parts with {len(labels)} dimension labels.")
    return NamedKey(tuple(zip(labels[-len(parts):], parts)))


def merge_keys(old: GroupKey, new: GroupKey, old_labels: Sequence[str], new_label: str) -> GroupKey:
    """Combine the key of an existing bucket with the key of one of its sub-buckets."""
    if isinstance(old, NamedKey) or isinstance(new, NamedKey):
        return as_named(old, old_labels).merge(as_named(new, (new_label,)))
    return TupleKey(old.parts() + new.parts())


def key_of(obj: Any) -> GroupKey:
    """Coerce a plain lookup value (scalar, tuple or mapping) into a group key."""
    if isinstance(obj, (ScalarKey, TupleKey, NamedKey)):
        return obj
    if isinstance(obj, Mapping):
        return NamedKey.from_mapping(obj)
    if isinstance(obj, tuple):
        return TupleKey(obj)
    return ScalarKey(obj)


__all__ = [
    "GroupKey",
    "NULL_KEY",
    "NamedKey",
    "ScalarKey",
    "TupleKey",
    "as_named",
    "key_of",
    "merge_keys",
]
