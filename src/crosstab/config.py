"""Layout configuration for cross-tab tables."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_TOTAL_PREFIX = "total"
DEFAULT_HEADER_SEPARATOR = "/"


@dataclass(frozen=True)
class CrossTabConfig:
    """Labels used in the rendered table and the malformed-chain policy.

    With `strict` unset, `to_2d` hands back its input when the grouping is not
    exactly two named dimensions deep; with it set, `MalformedChainError` is raised.
    """

    total_prefix: str = DEFAULT_TOTAL_PREFIX
    header_separator: str = DEFAULT_HEADER_SEPARATOR
    strict: bool = False

    def validate(self) -> None:
        if not isinstance(self.total_prefix, str) or not isinstance(self.header_separator, str):
            raise ValueError("Cross-tab labels must be strings.")
        if not self.header_separator:
            raise ValueError("Header separator must not be empty.")

    def total_label(self, label: str) -> str:
        return f"{self.total_prefix} {label}".strip()

    def corner_label(self, row_dimension: str, col_dimension: str) -> str:
        return f"{row_dimension}{self.header_separator}{col_dimension}"


__all__ = ["CrossTabConfig", "DEFAULT_HEADER_SEPARATOR", "DEFAULT_TOTAL_PREFIX"]
