"""Exceptions raised by the pivot and cross-tab layers."""

from __future__ import annotations


class PivotError(ValueError):
    """Base class for pivot-related failures."""


class MalformedChainError(PivotError):
    """Raised in strict mode when a mapping is not the expected pivot chain."""


__all__ = ["MalformedChainError", "PivotError"]
