"""In-memory persistence and search backends for tests and local runs."""

from __future__ import annotations

import asyncio
import fnmatch
import math
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from Multitenant_API.models import DomainObject, Pager
from Multitenant_API.utils.identifiers import new_id

from .base import ObjectDAO, SearchIndex

_EARTH_RADIUS_KM = 6371.0
_TOKEN = re.compile(r"\w+")


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _values(value: Any) -> Iterable[str]:
    """Flatten a property value into the strings it can be matched by."""
    if value is None:
        return
    if isinstance(value, Mapping):
        for item in value.values():
            yield from _values(item)
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            yield from _values(item)
    else:
        yield _as_text(value)


def _field_values(obj: DomainObject, field: str | None) -> list[str]:
    if field:
        return list(_values(obj.get(field)))
    return list(_values(obj.model_dump()))


def _parse_latlng(value: Any) -> tuple[float, float] | None:
    if not isinstance(value, str) or "," not in value:
        return None
    lat, _, lng = value.partition(",")
    try:
        return float(lat), float(lng)
    except ValueError:
        return None


def _distance_km(a: tuple[float, float], b: tuple[float, float]) -> float:
    lat1, lng1, lat2, lng2 = map(math.radians, (*a, *b))
    h = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    )
    return 2 * _EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def _matches_query(obj: DomainObject, query: str) -> bool:
    query = (query or "").strip()
    if not query or query == "*":
        return True
    haystack = [value.lower() for value in _field_values(obj, None)]
    for token in query.lower().split():
        if "*" in token or "?" in token:
            if not any(fnmatch.fnmatchcase(value, token) for value in haystack):
                return False
        elif not any(token in value for value in haystack):
            return False
    return True


class InMemoryDAO(ObjectDAO):
    """Dictionary backed persistence keyed by tenant and object id."""

    def __init__(self) -> None:
        self._objects: dict[str, dict[str, DomainObject]] = {}
        self._lock = asyncio.Lock()

    async def create(self, app_id: str, obj: DomainObject) -> str | None:
        if obj.id is None:
            obj.id = new_id()
        async with self._lock:
            self._objects.setdefault(app_id, {})[obj.id] = obj.model_copy(deep=True)
        return obj.id

    async def read(self, app_id: str, object_id: str | None) -> DomainObject | None:
        if not object_id:
            return None
        async with self._lock:
            stored = self._objects.get(app_id, {}).get(object_id)
            return stored.model_copy(deep=True) if stored is not None else None

    async def update(self, app_id: str, obj: DomainObject) -> None:
        if obj.id is None:
            return
        async with self._lock:
            self._objects.setdefault(app_id, {})[obj.id] = obj.model_copy(deep=True)

    async def delete(self, app_id: str, obj: DomainObject) -> None:
        if obj.id is None:
            return
        async with self._lock:
            self._objects.get(app_id, {}).pop(obj.id, None)


class InMemorySearchIndex(SearchIndex):
    """Naive search engine evaluating every query with a linear scan."""

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, DomainObject]] = {}
        self._lock = asyncio.Lock()

    async def index(self, app_id: str, obj: DomainObject) -> None:
        if obj.id is None:
            return
        async with self._lock:
            self._documents.setdefault(app_id, {})[obj.id] = obj.model_copy(deep=True)

    async def unindex(self, app_id: str, obj: DomainObject) -> None:
        if obj.id is None:
            return
        async with self._lock:
            self._documents.get(app_id, {}).pop(obj.id, None)

    async def _candidates(self, app_id: str, type_name: str | None) -> list[DomainObject]:
        async with self._lock:
            documents = list(self._documents.get(app_id, {}).values())
        return [
            doc.model_copy(deep=True)
            for doc in documents
            if not type_name or doc.type == type_name
        ]

    async def find_by_id(self, app_id: str, object_id: str | None) -> DomainObject | None:
        if not object_id:
            return None
        async with self._lock:
            doc = self._documents.get(app_id, {}).get(object_id)
            return doc.model_copy(deep=True) if doc is not None else None

    async def find_by_ids(self, app_id: str, object_ids: Sequence[str]) -> list[DomainObject]:
        found = []
        for object_id in object_ids or ():
            doc = await self.find_by_id(app_id, object_id)
            if doc is not None:
                found.append(doc)
        return found

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
        origin = (lat, lng)
        hits = []
        for doc in await self._candidates(app_id, type_name):
            point = _parse_latlng(doc.get("latlng"))
            if point is None or _distance_km(origin, point) > radius_km:
                continue
            if _matches_query(doc, query):
                hits.append(doc)
        return pager.paginate(hits)

    async def find_prefix(
        self,
        app_id: str,
        type_name: str | None,
        field: str | None,
        prefix: str | None,
        pager: Pager,
    ) -> list[DomainObject]:
        if not field or prefix is None:
            pager.count = 0
            return []
        needle = prefix.lower()
        hits = [
            doc
            for doc in await self._candidates(app_id, type_name)
            if any(value.lower().startswith(needle) for value in _field_values(doc, field))
        ]
        return pager.paginate(hits)

    async def find_similar(
        self,
        app_id: str,
        type_name: str | None,
        filter_id: str | None,
        fields: Sequence[str],
        like: str | None,
        pager: Pager,
    ) -> list[DomainObject]:
        wanted = {token.lower() for token in _TOKEN.findall(like or "")}
        scored: list[tuple[int, DomainObject]] = []
        for doc in await self._candidates(app_id, type_name):
            if filter_id and doc.id == filter_id:
                continue
            tokens = {
                token.lower()
                for field in fields
                for value in _field_values(doc, field)
                for token in _TOKEN.findall(value)
            }
            score = len(wanted & tokens)
            if score:
                scored.append((score, doc))
        scored.sort(key=lambda item: (-item[0], item[1].id or ""))
        return pager.paginate([doc for _, doc in scored], presorted=True)

    async def find_tagged(
        self, app_id: str, type_name: str | None, tags: Sequence[str], pager: Pager
    ) -> list[DomainObject]:
        wanted = set(tags)
        hits = [
            doc for doc in await self._candidates(app_id, type_name) if wanted.issubset(doc.tags)
        ]
        return pager.paginate(hits)

    async def find_term_in_list(
        self,
        app_id: str,
        type_name: str | None,
        field: str | None,
        terms: Sequence[str],
        pager: Pager,
    ) -> list[DomainObject]:
        if not field or not terms:
            pager.count = 0
            return []
        wanted = set(terms)
        hits = [
            doc
            for doc in await self._candidates(app_id, type_name)
            if wanted.intersection(_field_values(doc, field))
        ]
        return pager.paginate(hits)

    @staticmethod
    def _matches_terms(doc: DomainObject, terms: Mapping[str, str], match_all: bool) -> bool:
        results = (value in _field_values(doc, field) for field, value in terms.items())
        return all(results) if match_all else any(results)

    async def find_terms(
        self,
        app_id: str,
        type_name: str | None,
        terms: Mapping[str, str],
        match_all: bool,
        pager: Pager,
    ) -> list[DomainObject]:
        if not terms:
            pager.count = 0
            return []
        hits = [
            doc
            for doc in await self._candidates(app_id, type_name)
            if self._matches_terms(doc, terms, match_all)
        ]
        return pager.paginate(hits)

    async def find_wildcard(
        self,
        app_id: str,
        type_name: str | None,
        field: str | None,
        pattern: str,
        pager: Pager,
    ) -> list[DomainObject]:
        glob = (pattern or "*").lower()
        hits = [
            doc
            for doc in await self._candidates(app_id, type_name)
            if any(fnmatch.fnmatchcase(value.lower(), glob) for value in _field_values(doc, field))
        ]
        return pager.paginate(hits)

    async def find_query(
        self, app_id: str, type_name: str | None, query: str, pager: Pager
    ) -> list[DomainObject]:
        hits = [
            doc for doc in await self._candidates(app_id, type_name) if _matches_query(doc, query)
        ]
        return pager.paginate(hits)

    async def get_count(
        self,
        app_id: str,
        type_name: str | None,
        terms: Mapping[str, str] | None = None,
    ) -> int:
        candidates = await self._candidates(app_id, type_name)
        if terms is None:
            return len(candidates)
        if not terms:
            return 0
        return sum(1 for doc in candidates if self._matches_terms(doc, terms, True))
