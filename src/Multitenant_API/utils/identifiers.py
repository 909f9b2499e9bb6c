"""Identifier utilities for object ids and creation timestamps."""

from __future__ import annotations

import secrets
import time

_RANDOM_BITS = 22


def timestamp() -> int:
    """Return the current time in epoch milliseconds."""
    return int(time.time() * 1000)


def new_id() -> str:
    """Return a roughly time-ordered numeric identifier."""
    return str((timestamp() << _RANDOM_BITS) | secrets.randbits(_RANDOM_BITS))


def normalize_identifier(value: str) -> str:
    """Normalize identifiers to lowercase without whitespace."""
    return "".join(value.split()).lower()
