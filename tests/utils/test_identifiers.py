"""Tests for identifier utilities."""

from Multitenant_API.utils.identifiers import new_id, normalize_identifier, timestamp


def test_new_id_is_numeric_and_unique() -> None:
    ids = {new_id() for _ in range(200)}
    assert len(ids) == 200
    assert all(value.isdigit() for value in ids)


def test_new_id_is_roughly_time_ordered(monkeypatch) -> None:
    """Identifiers issued in a later millisecond sort after earlier ones."""
    ticks = iter([1_000_000, 1_000_500])
    monkeypatch.setattr("Multitenant_API.utils.identifiers.timestamp", lambda: next(ticks))
    first, second = new_id(), new_id()
    assert int(second) > int(first)


def test_timestamp_is_epoch_milliseconds(monkeypatch) -> None:
    monkeypatch.setattr("Multitenant_API.utils.identifiers.time.time", lambda: 1_700_000_000.123)
    assert timestamp() == 1_700_000_000_123


def test_normalize_identifier_strips_whitespace() -> None:
    assert normalize_identifier(" My App ") == "myapp"
