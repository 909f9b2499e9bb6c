"""Abstract persistence and search ports.

This module defines the contracts the dispatch core consumes. Concrete
engines (databases, search clusters) live outside the core; the in-memory
implementations in :mod:`Multitenant_API.storage.memory` satisfy the same
contracts for tests and local runs.

The module provides:
- ObjectDAO interface for object read/write/delete by tenant and id
- SearchIndex interface for the query capabilities used by the dispatcher
- StorageError raised by backends on engine failures

Invariants:
    Type names passed to either port are canonical, never tenant aliases.

Thread Safety:
    Implementations must be safe to call concurrently from many requests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from Multitenant_API.models import DomainObject, Pager


class StorageError(RuntimeError):
    """Base exception for storage and search backends."""


class ObjectDAO(ABC):
    """Interface for the persistence engine."""

    @abstractmethod
    async def create(self, app_id: str, obj: DomainObject) -> str | None:
        """Persist ``obj`` and return its id, or ``None`` when rejected."""
        raise NotImplementedError

    @abstractmethod
    async def read(self, app_id: str, object_id: str | None) -> DomainObject | None:
        """Return the object stored under ``object_id`` or ``None``."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, app_id: str, obj: DomainObject) -> None:
        """Overwrite the stored copy of ``obj``."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, app_id: str, obj: DomainObject) -> None:
        """Remove ``obj``; removing an absent object is not an error."""
        raise NotImplementedError

    async def read_all(
        self, app_id: str, object_ids: Sequence[str]
    ) -> dict[str, DomainObject]:
        """Return found objects keyed by id, preserving request order."""
        found: dict[str, DomainObject] = {}
        for object_id in object_ids:
            obj = await self.read(app_id, object_id)
            if obj is not None:
                found[object_id] = obj
        return found

    async def delete_all(self, app_id: str, objects: Sequence[DomainObject]) -> None:
        for obj in objects:
            await self.delete(app_id, obj)


class SearchIndex(ABC):
    """Interface for the search engine.

    Listing methods write the total number of hits into ``pager.count`` and
    return the requested page only. ``type_name`` of ``None`` searches every
    type of the tenant.
    """

    @abstractmethod
    async def index(self, app_id: str, obj: DomainObject) -> None:
        raise NotImplementedError

    @abstractmethod
    async def unindex(self, app_id: str, obj: DomainObject) -> None:
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, app_id: str, object_id: str | None) -> DomainObject | None:
        raise NotImplementedError

    @abstractmethod
    async def find_by_ids(self, app_id: str, object_ids: Sequence[str]) -> list[DomainObject]:
        raise NotImplementedError

    @abstractmethod
    async def find_nearby(
        self,
        app_id: str,
        type_name: str | None,
        query: str,
        radius_km: int,
        lat: float,
        lng: float,
        pager: Pager,
    ) -> list[DomainObject]:
        raise NotImplementedError

    @abstractmethod
    async def find_prefix(
        self,
        app_id: str,
        type_name: str | None,
        field: str | None,
        prefix: str | None,
        pager: Pager,
    ) -> list[DomainObject]:
        raise NotImplementedError

    @abstractmethod
    async def find_similar(
        self,
        app_id: str,
        type_name: str | None,
        filter_id: str | None,
        fields: Sequence[str],
        like: str | None,
        pager: Pager,
    ) -> list[DomainObject]:
        raise NotImplementedError

    @abstractmethod
    async def find_tagged(
        self, app_id: str, type_name: str | None, tags: Sequence[str], pager: Pager
    ) -> list[DomainObject]:
        raise NotImplementedError

    @abstractmethod
    async def find_term_in_list(
        self,
        app_id: str,
        type_name: str | None,
        field: str | None,
        terms: Sequence[str],
        pager: Pager,
    ) -> list[DomainObject]:
        raise NotImplementedError

    @abstractmethod
    async def find_terms(
        self,
        app_id: str,
        type_name: str | None,
        terms: Mapping[str, str],
        match_all: bool,
        pager: Pager,
    ) -> list[DomainObject]:
        raise NotImplementedError

    @abstractmethod
    async def find_wildcard(
        self,
        app_id: str,
        type_name: str | None,
        field: str | None,
        pattern: str,
        pager: Pager,
    ) -> list[DomainObject]:
        raise NotImplementedError

    @abstractmethod
    async def find_query(
        self, app_id: str, type_name: str | None, query: str, pager: Pager
    ) -> list[DomainObject]:
        raise NotImplementedError

    @abstractmethod
    async def get_count(
        self,
        app_id: str,
        type_name: str | None,
        terms: Mapping[str, str] | None = None,
    ) -> int:
        """Count objects of ``type_name``, optionally matching every term."""
        raise NotImplementedError
