"""Lenient parsing of loosely-typed query parameters.

Every helper falls back to its default instead of raising, so malformed
numbers behave exactly like omitted ones.
"""

from __future__ import annotations


def to_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def to_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value.strip())
    except ValueError:
        return default


def to_bool(value: str | None) -> bool:
    """Return ``True`` only for a case-insensitive ``"true"``."""
    return value is not None and value.strip().lower() == "true"
