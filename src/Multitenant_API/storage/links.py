"""Link-graph capabilities built on top of the DAO and Search ports.

Key Responsibilities:
    - Persist symmetric edges between two objects as ``linker`` objects
    - Derive edge ids from both endpoints so creating a link is idempotent
    - Resolve asymmetric parent to children relations through ``parentid``

Collaborators:
    - Upstream: :class:`Multitenant_API.gateway.handlers.links.LinkGraphHandler`
    - Downstream: :class:`ObjectDAO` for edge records, :class:`SearchIndex`
      for counting and listing

Thread Safety:
    - Stateless apart from the injected ports.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog

from Multitenant_API.models import DomainObject, Linker, Pager
from Multitenant_API.utils.identifiers import timestamp

from .base import ObjectDAO, SearchIndex

logger = structlog.get_logger(__name__)

LINKER_TYPE = "linker"
_SCAN_PAGE_SIZE = 100


async def _collect(fetch: Callable[[Pager], Awaitable[list[DomainObject]]]) -> list[DomainObject]:
    """Drain every page of a listing call."""
    collected: list[DomainObject] = []
    page = 1
    while True:
        pager = Pager(page=page, limit=_SCAN_PAGE_SIZE)
        batch = await fetch(pager)
        collected.extend(batch)
        if not batch or len(collected) >= pager.count:
            return collected
        page += 1


class LinkGraph:
    """Edges and child relations of the objects of one store."""

    def __init__(self, dao: ObjectDAO, search: SearchIndex, *, separator: str = ":") -> None:
        self.dao = dao
        self.search = search
        self.separator = separator

    def link_id(self, source: DomainObject, target_type: str, target_id: str) -> str:
        """Return the edge id for ``source`` and the given target.

        Endpoints are ordered by ``(type, id)`` so both directions map to the
        same record.
        """
        first, second = sorted([(source.type, source.id or ""), (target_type, target_id)])
        return self.separator.join((*first, *second))

    def _edge(self, app_id: str, source: DomainObject, target: DomainObject) -> Linker:
        (type1, id1), (type2, id2) = sorted(
            [(source.type, source.id or ""), (target.type, target.id or "")]
        )
        return Linker(
            id=self.link_id(source, target.type, target.id or ""),
            appid=app_id,
            timestamp=timestamp(),
            id1=id1,
            id2=id2,
            type1=type1,
            type2=type2,
        )

    async def link(self, app_id: str, source: DomainObject, target_id: str) -> str | None:
        """Link ``source`` to the object stored under ``target_id``.

        Returns:
            The edge id, or ``None`` when the target does not exist.
        """
        target = await self.dao.read(app_id, target_id)
        if target is None or source.id is None:
            return None
        edge = self._edge(app_id, source, target)
        link_id = await self.dao.create(app_id, edge)
        if link_id is None:
            return None
        await self.search.index(app_id, edge)
        logger.debug("links.created", app_id=app_id, link_id=link_id)
        return link_id

    async def unlink(
        self, app_id: str, source: DomainObject, target_type: str, target_id: str
    ) -> None:
        edge = await self.dao.read(app_id, self.link_id(source, target_type, target_id))
        if edge is None:
            return
        await self.dao.delete(app_id, edge)
        await self.search.unindex(app_id, edge)
        logger.debug("links.deleted", app_id=app_id, link_id=edge.id)

    async def _edges(
        self, app_id: str, source: DomainObject, target_type: str | None = None
    ) -> list[DomainObject]:
        edges: list[DomainObject] = []
        for near, far in (("id1", "type2"), ("id2", "type1")):
            terms = {near: source.id or ""}
            if target_type:
                terms[far] = target_type
            edges.extend(
                await _collect(
                    lambda pager, terms=terms: self.search.find_terms(
                        app_id, LINKER_TYPE, terms, True, pager
                    )
                )
            )
        unique = {edge.id: edge for edge in edges}
        return list(unique.values())

    async def unlink_all(self, app_id: str, source: DomainObject) -> None:
        edges = await self._edges(app_id, source)
        await self.dao.delete_all(app_id, edges)
        for edge in edges:
            await self.search.unindex(app_id, edge)
        logger.debug("links.cleared", app_id=app_id, source_id=source.id, removed=len(edges))

    async def is_linked(
        self, app_id: str, source: DomainObject, target_type: str, target_id: str
    ) -> bool:
        return await self.dao.read(app_id, self.link_id(source, target_type, target_id)) is not None

    async def count_links(self, app_id: str, source: DomainObject, target_type: str) -> int:
        outgoing = await self.search.get_count(
            app_id, LINKER_TYPE, {"id1": source.id or "", "type2": target_type}
        )
        incoming = await self.search.get_count(
            app_id, LINKER_TYPE, {"id2": source.id or "", "type1": target_type}
        )
        return outgoing + incoming

    async def get_linked_objects(
        self, app_id: str, source: DomainObject, target_type: str, pager: Pager
    ) -> list[DomainObject]:
        """Return one page of the objects of ``target_type`` linked to ``source``.

        Targets are sorted like any other listing and ``pager.count`` counts
        the targets that still exist.
        """
        other_ids = {
            edge.other(source.id or "")
            for edge in await self._edges(app_id, source, target_type)
            if isinstance(edge, Linker)
        }
        found = await self.dao.read_all(app_id, sorted(other_ids))
        return pager.paginate(list(found.values()))

    def _child_terms(
        self, source: DomainObject, field: str | None = None, term: str | None = None
    ) -> dict[str, str]:
        terms = {"parentid": source.id or ""}
        if field and term is not None:
            terms[field] = term
        return terms

    async def count_children(self, app_id: str, source: DomainObject, child_type: str) -> int:
        return await self.search.get_count(app_id, child_type, self._child_terms(source))

    async def get_children(
        self,
        app_id: str,
        source: DomainObject,
        child_type: str,
        pager: Pager,
        *,
        field: str | None = None,
        term: str | None = None,
    ) -> list[DomainObject]:
        return await self.search.find_terms(
            app_id, child_type, self._child_terms(source, field, term), True, pager
        )

    async def delete_children(self, app_id: str, source: DomainObject, child_type: str) -> None:
        children = await _collect(
            lambda pager: self.search.find_terms(
                app_id, child_type, self._child_terms(source), True, pager
            )
        )
        await self.dao.delete_all(app_id, children)
        for child in children:
            await self.search.unindex(app_id, child)
        logger.debug(
            "links.children_deleted", app_id=app_id, source_id=source.id, removed=len(children)
        )


__all__ = ["LINKER_TYPE", "LinkGraph"]
