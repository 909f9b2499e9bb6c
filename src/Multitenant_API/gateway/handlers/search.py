"""Translation of search requests onto the search port.

A query type keyword plus loosely-typed query parameters selects one of the
strategies below. Each strategy applies its own defaults and writes the
number of hits into the shared :class:`Pager`; the dispatcher then wraps the
page in ``{"items", "page", "totalHits"}``.

========== ========================================= ==========================
keyword    parameters                                behaviour
========== ========================================= ==========================
id         ``id``                                    single object by id
ids        ``ids`` (multi)                           objects by ids
nearby     ``latlng``, ``radius`` (10), ``q``        geo radius search
prefix     ``field``, ``prefix``                     prefix match
similar    ``fields`` (multi), ``filterid``, ``like`` more-like-this
tagged     ``tags`` (multi)                          objects carrying all tags
in         ``field``, ``terms`` (multi)              field value in terms
terms      ``terms`` (``field:value``), ``matchall`` term match or count
wildcard   ``field``, ``q``                          wildcard match
count      none                                      count of the type
query      ``q`` (``*``)                             full-text query (default)
========== ========================================= ==========================
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import structlog

from Multitenant_API.config.settings import PagerSettings
from Multitenant_API.models import DomainObject, Pager, QueryParamsLike, Tenant
from Multitenant_API.observability.metrics import record_search
from Multitenant_API.storage import SearchIndex
from Multitenant_API.utils.params import to_bool, to_float, to_int

from .types import TypeResolver

logger = structlog.get_logger(__name__)

DEFAULT_RADIUS_KM = 10
DEFAULT_QUERY = "*"

Strategy = Callable[[str, str | None, QueryParamsLike, Pager], Awaitable[list[DomainObject]]]


def parse_terms(tuples: Sequence[str], separator: str = ":") -> dict[str, str]:
    """Split ``field:value`` tuples; tuples without a separator are dropped."""
    terms: dict[str, str] = {}
    for item in tuples:
        if item and item.strip() and separator in item:
            field, value = item.split(separator, 1)
            terms[field] = value
    return terms


class QueryDispatcher:
    """Selects and runs the search strategy named by a query type."""

    def __init__(
        self,
        search: SearchIndex,
        *,
        resolver: TypeResolver | None = None,
        pager: PagerSettings | None = None,
        separator: str = ":",
    ) -> None:
        self.search = search
        self.resolver = resolver or TypeResolver()
        self.pager_settings = pager or PagerSettings()
        self.separator = separator
        self._strategies: dict[str, Strategy] = {
            "id": self._by_id,
            "ids": self._by_ids,
            "nearby": self._nearby,
            "prefix": self._prefix,
            "similar": self._similar,
            "tagged": self._tagged,
            "in": self._in,
            "terms": self._terms,
            "wildcard": self._wildcard,
            "count": self._count,
        }

    def new_pager(self, params: QueryParamsLike) -> Pager:
        return Pager.from_params(
            params,
            default_limit=self.pager_settings.default_limit,
            max_limit=self.pager_settings.max_limit,
        )

    def effective_type(
        self, tenant: Tenant, type_override: str | None, params: QueryParamsLike
    ) -> str | None:
        """Return the path type, else the aliased ``type`` query parameter."""
        if type_override and type_override.strip() and type_override != "search":
            return type_override
        param = params.get("type")
        if param is None or not param.strip():
            return None
        return self.resolver.resolve(tenant, param)

    async def dispatch(
        self,
        tenant: Tenant,
        querytype: str | None,
        params: QueryParamsLike,
        type_override: str | None = None,
    ) -> dict[str, Any]:
        app_id = tenant.identifier
        type_name = self.effective_type(tenant, type_override, params)
        if not querytype or not querytype.strip():
            querytype = params.get("querytype")
        pager = self.new_pager(params)
        strategy = self._strategies.get(querytype or "", self._query)
        record_search(querytype if querytype in self._strategies else "query")
        logger.debug(
            "search.dispatch", app_id=app_id, type=type_name, querytype=querytype or "query"
        )
        items = await strategy(app_id, type_name, params, pager)
        return {"items": items, "page": pager.page, "totalHits": pager.count}

    # Strategies ---------------------------------------------------------

    async def _by_id(self, app_id, type_name, params, pager) -> list[DomainObject]:
        obj = await self.search.find_by_id(app_id, params.get("id"))
        if obj is None:
            return []
        pager.count = 1
        return [obj]

    async def _by_ids(self, app_id, type_name, params, pager) -> list[DomainObject]:
        items = await self.search.find_by_ids(app_id, params.getlist("ids"))
        pager.count = len(items)
        return items

    async def _nearby(self, app_id, type_name, params, pager) -> list[DomainObject]:
        latlng = params.get("latlng")
        if not latlng or "," not in latlng:
            return []
        lat, lng = latlng.split(",", 1)
        return await self.search.find_nearby(
            app_id,
            type_name,
            params.get("q", DEFAULT_QUERY),
            to_int(params.get("radius"), DEFAULT_RADIUS_KM),
            to_float(lat, 0.0),
            to_float(lng, 0.0),
            pager,
        )

    async def _prefix(self, app_id, type_name, params, pager) -> list[DomainObject]:
        return await self.search.find_prefix(
            app_id, type_name, params.get("field"), params.get("prefix"), pager
        )

    async def _similar(self, app_id, type_name, params, pager) -> list[DomainObject]:
        if "fields" not in params:
            return []
        return await self.search.find_similar(
            app_id,
            type_name,
            params.get("filterid"),
            params.getlist("fields"),
            params.get("like"),
            pager,
        )

    async def _tagged(self, app_id, type_name, params, pager) -> list[DomainObject]:
        if "tags" not in params:
            return []
        return await self.search.find_tagged(app_id, type_name, params.getlist("tags"), pager)

    async def _in(self, app_id, type_name, params, pager) -> list[DomainObject]:
        return await self.search.find_term_in_list(
            app_id, type_name, params.get("field"), params.getlist("terms"), pager
        )

    async def _terms(self, app_id, type_name, params, pager) -> list[DomainObject]:
        if "terms" not in params:
            return []
        terms = parse_terms(params.getlist("terms"), self.separator)
        if "count" in params:
            pager.count = await self.search.get_count(app_id, type_name, terms)
            return []
        match_all = to_bool(params.get("matchall")) if "matchall" in params else True
        return await self.search.find_terms(app_id, type_name, terms, match_all, pager)

    async def _wildcard(self, app_id, type_name, params, pager) -> list[DomainObject]:
        return await self.search.find_wildcard(
            app_id, type_name, params.get("field"), params.get("q", DEFAULT_QUERY), pager
        )

    async def _count(self, app_id, type_name, params, pager) -> list[DomainObject]:
        pager.count = await self.search.get_count(app_id, type_name)
        return []

    async def _query(self, app_id, type_name, params, pager) -> list[DomainObject]:
        return await self.search.find_query(
            app_id, type_name, params.get("q", DEFAULT_QUERY), pager
        )


__all__ = ["DEFAULT_RADIUS_KM", "QueryDispatcher", "parse_terms"]
