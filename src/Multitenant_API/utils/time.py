"""Timestamp helpers with strict UTC enforcement.

Key Responsibilities:
    - Provide a canonical way to fetch timezone-aware UTC timestamps
    - Render approximate human readable durations for ``/utils/timeago``
"""

from __future__ import annotations

from datetime import UTC, datetime

_UNITS: tuple[tuple[str, int], ...] = (
    ("year", 365 * 24 * 60 * 60 * 1000),
    ("month", 30 * 24 * 60 * 60 * 1000),
    ("day", 24 * 60 * 60 * 1000),
    ("hour", 60 * 60 * 1000),
    ("minute", 60 * 1000),
    ("second", 1000),
)


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def format_date(pattern: str | None = None, moment: datetime | None = None) -> str:
    """Format ``moment`` (default: now, UTC) with a ``strftime`` pattern."""
    return (moment or utc_now()).strftime(pattern or "%Y-%m-%d")


def time_ago(delta_ms: int) -> str:
    """Return an approximate duration such as ``"3 hours"`` for ``delta_ms``.

    Durations under a second are reported as ``"1 second"``.
    """
    delta = abs(delta_ms)
    for unit, size in _UNITS:
        if delta >= size:
            value = delta // size
            return f"{value} {unit}" + ("s" if value != 1 else "")
    return "1 second"
