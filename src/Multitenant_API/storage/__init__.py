"""Persistence and search ports with in-memory reference implementations."""

from .base import ObjectDAO, SearchIndex, StorageError
from .links import LINKER_TYPE, LinkGraph
from .memory import InMemoryDAO, InMemorySearchIndex

__all__ = [
    "InMemoryDAO",
    "InMemorySearchIndex",
    "LINKER_TYPE",
    "LinkGraph",
    "ObjectDAO",
    "SearchIndex",
    "StorageError",
]
