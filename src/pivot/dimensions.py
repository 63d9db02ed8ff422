"""Dimension descriptors and classifier helpers."""

from __future__ import annotations

import os
from collections.abc import Sequence, Set
from dataclasses import dataclass
from typing import Any, Callable, Collection, Hashable, List, Mapping, Optional

import numpy as np

from .keys import NULL_KEY

Classifier = Callable[[Any], Any]

# Text is a single value even though it is a sequence.
SCALAR_SEQUENCES = (str, bytes, bytearray)


def derive_label(classify: Classifier) -> str:
    """Build a readable label for an unnamed classifier."""
    label = getattr(classify, "__qualname__", None) or getattr(classify, "__name__", None)
    if not label:
        return repr(classify)
    code = getattr(classify, "__code__", None)
    if label.endswith("<lambda>") and code is not None:
        label = f"{label}@{os.path.basename(code.co_filename)}:{code.co_firstlineno}"
    return label


@dataclass(frozen=True)
class Dimension:
    """One pivot pass: a classifier and the label its values are filed under."""

    classify: Classifier
    name: Optional[str] = None
    label: str = ""

    @classmethod
    def create(
        cls,
        classify: Classifier,
        name: Optional[str] = None,
        taken: Collection[str] = (),
    ) -> "Dimension":
        if not callable(classify):
            raise TypeError(f"Classifier must be callable, received {type(classify).__name__}")
        if name is not None:
            return cls(classify, name, name)
        label = derive_label(classify)
        candidate, suffix = label, 2
        while candidate in taken:
            candidate = f"{label}#{suffix}"
            suffix += 1
        return cls(classify, None, candidate)

    @property
    def named(self) -> bool:
        return self.name is not None

    def values_for(self, record: Any) -> List[Hashable]:
        return dimension_values(self.classify(record))


def explodes(raw: Any) -> bool:
    """Whether a classifier result files the record once per element."""
    if isinstance(raw, np.ndarray):
        return True
    return isinstance(raw, (Sequence, Set)) and not isinstance(raw, SCALAR_SEQUENCES)


def dimension_values(raw: Any) -> List[Hashable]:
    """Expand a classifier result into the values a record is filed under.

    Arrays are flattened; an empty collection files the record under `NULL_KEY`.
    """
    if not explodes(raw):
        return [raw]
    values = raw.ravel().tolist() if isinstance(raw, np.ndarray) else list(raw)
    return values or [NULL_KEY]


def by_field(field: str, default: Any = None) -> Classifier:
    """Classifier reading `field` from mapping records or as an attribute."""

    def classify(record: Any) -> Any:
        if isinstance(record, Mapping):
            return record.get(field, default)
        return getattr(record, field, default)

    classify.__name__ = classify.__qualname__ = f"by_field({field!r})"
    return classify


__all__ = [
    "Classifier",
    "Dimension",
    "by_field",
    "derive_label",
    "dimension_values",
    "explodes",
]
