"""Tests for time utilities."""

from datetime import UTC, datetime

import pytest

from Multitenant_API.utils.time import format_date, time_ago, utc_now


def test_utc_now_returns_timezone_aware() -> None:
    """`utc_now` should include timezone information in UTC."""
    now = utc_now()
    assert isinstance(now, datetime)
    assert now.tzinfo is UTC


def test_format_date_uses_pattern() -> None:
    moment = datetime(2024, 6, 1, 12, 30, tzinfo=UTC)
    assert format_date("%d/%m/%Y %H:%M", moment) == "01/06/2024 12:30"
    assert format_date(None, moment) == "2024-06-01"


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (0, "1 second"),
        (1_000, "1 second"),
        (45_000, "45 seconds"),
        (60_000, "1 minute"),
        (3 * 60 * 60 * 1000, "3 hours"),
        (2 * 24 * 60 * 60 * 1000, "2 days"),
        (-90 * 60 * 1000, "1 hour"),
    ],
)
def test_time_ago_picks_largest_unit(delta: int, expected: str) -> None:
    assert time_ago(delta) == expected
