"""Utility modules shared across the API layers."""

from .identifiers import new_id, timestamp
from .time import utc_now

__all__ = ["new_id", "timestamp", "utc_now"]
