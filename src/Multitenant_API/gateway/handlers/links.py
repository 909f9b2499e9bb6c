"""Link and child-relation endpoints of a single source object.

The target type and id come from the path first and fall back to the
``type`` and ``id`` query parameters. ``childrenonly`` and ``count`` are
presence flags: their values are ignored.
"""

from __future__ import annotations

from typing import Any

import structlog

from Multitenant_API.models import DomainObject, QueryParamsLike, Tenant
from Multitenant_API.storage import LinkGraph

from ..presentation.errors import bad_request, not_found
from .search import QueryDispatcher

logger = structlog.get_logger(__name__)


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class LinkGraphHandler:
    """Create, inspect and delete links and children of an object."""

    def __init__(self, graph: LinkGraph, dispatcher: QueryDispatcher) -> None:
        self.dao = graph.dao
        self.graph = graph
        self.dispatcher = dispatcher

    def target(
        self,
        tenant: Tenant,
        params: QueryParamsLike,
        type2: str | None = None,
        id2: str | None = None,
    ) -> tuple[str | None, str | None]:
        """Return ``(type2, id2)`` with the query parameter fallbacks applied.

        A ``type`` parameter goes through the tenant's type aliases; a path
        type arrives already resolved.
        """
        if _blank(type2):
            param = params.get("type")
            type2 = None if _blank(param) else self.dispatcher.resolver.resolve(tenant, param)
        id2 = params.get("id") if _blank(id2) else id2
        return type2, id2

    async def _source(self, tenant: Tenant, object_id: str) -> DomainObject:
        source = await self.dao.read(tenant.identifier, object_id)
        if source is None:
            raise not_found(f"Object not found: {object_id}")
        return source

    async def create(
        self, tenant: Tenant, object_id: str, params: QueryParamsLike, id2: str | None = None
    ) -> str:
        source = await self._source(tenant, object_id)
        _, id2 = self.target(tenant, params, None, id2)
        if id2 is None:
            raise bad_request("Parameters 'type' and 'id' are missing.")
        link_id = await self.graph.link(tenant.identifier, source, id2)
        if link_id is None:
            raise bad_request("Failed to create link.")
        return link_id

    async def read(
        self,
        tenant: Tenant,
        object_id: str,
        params: QueryParamsLike,
        type2: str | None = None,
        id2: str | None = None,
    ) -> bool | dict[str, Any]:
        """Return an is-linked flag, or a ``{items, totalHits}`` listing."""
        source = await self._source(tenant, object_id)
        type2, id2 = self.target(tenant, params, type2, id2)
        if type2 is None:
            raise bad_request("Parameter 'type' is missing.")
        if id2 is not None:
            return await self.graph.is_linked(tenant.identifier, source, type2, id2)

        app_id = tenant.identifier
        pager = self.dispatcher.new_pager(params)
        items: list[DomainObject] = []
        if "childrenonly" not in params:
            if "count" in params:
                pager.count = await self.graph.count_links(app_id, source, type2)
            else:
                items = await self.graph.get_linked_objects(app_id, source, type2, pager)
        elif "count" in params:
            pager.count = await self.graph.count_children(app_id, source, type2)
        elif "field" in params and "term" in params:
            items = await self.graph.get_children(
                app_id, source, type2, pager, field=params.get("field"), term=params.get("term")
            )
        else:
            items = await self.graph.get_children(app_id, source, type2, pager)
        return {"items": items, "totalHits": pager.count}

    async def delete(
        self,
        tenant: Tenant,
        object_id: str,
        params: QueryParamsLike,
        type2: str | None = None,
        id2: str | None = None,
    ) -> None:
        """Unlink one, unlink all, or delete children.

        With a target type but no target id, children are deleted only when
        ``childrenonly`` is given; otherwise the call does nothing.
        """
        source = await self._source(tenant, object_id)
        type2, id2 = self.target(tenant, params, type2, id2)
        app_id = tenant.identifier
        if type2 is None and id2 is None:
            await self.graph.unlink_all(app_id, source)
        elif type2 is not None:
            if id2 is not None:
                await self.graph.unlink(app_id, source, type2, id2)
            elif "childrenonly" in params:
                await self.graph.delete_children(app_id, source, type2)
            else:
                logger.debug("links.delete_skipped", app_id=app_id, source_id=object_id, type2=type2)


__all__ = ["LinkGraphHandler"]
