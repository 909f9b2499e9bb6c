"""Single-object create, read, update and delete within a tenant.

Key Responsibilities:
    - Validate payloads against the model registered for their type
    - Assign ``id``, ``appid`` and ``timestamp`` on create; protect them on update
    - Keep the persistence store, the search index and the link graph in step

Collaborators:
    - Upstream: REST router, :class:`BatchHandler`
    - Downstream: :class:`ObjectDAO`, :class:`SearchIndex`, :class:`LinkGraph`,
      :class:`TenantDirectory`
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from Multitenant_API.auth.tenants import TenantDirectory
from Multitenant_API.models import DomainObject, ObjectTypeRegistry, Tenant, registry
from Multitenant_API.storage import LinkGraph, ObjectDAO, SearchIndex
from Multitenant_API.utils.identifiers import new_id, timestamp

from ..presentation.errors import bad_request, not_found

logger = structlog.get_logger(__name__)

PROTECTED_FIELDS = frozenset({"id", "type", "appid", "timestamp"})


def describe_validation_error(exc: ValidationError) -> str:
    """Render pydantic errors as a single readable message."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "body"
        problems.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "Invalid object. " + "; ".join(problems)


class CrudHandler:
    """Create, read, update and delete single objects of a tenant."""

    def __init__(
        self,
        dao: ObjectDAO,
        search: SearchIndex,
        tenants: TenantDirectory,
        *,
        types: ObjectTypeRegistry | None = None,
        graph: LinkGraph | None = None,
    ) -> None:
        self.dao = dao
        self.search = search
        self.tenants = tenants
        self.types = types or registry
        self.graph = graph or LinkGraph(dao, search)

    def _build(self, payload: Mapping[str, Any]) -> DomainObject:
        try:
            return self.types.build(payload)
        except ValidationError as exc:
            raise bad_request(describe_validation_error(exc)) from exc

    async def create(self, tenant: Tenant, type_name: str, payload: Any) -> DomainObject:
        if not isinstance(payload, Mapping):
            raise bad_request("Invalid JSON object.")
        data = dict(payload)
        data["type"] = type_name
        data["appid"] = tenant.identifier
        data["timestamp"] = timestamp()
        data.pop("updated", None)
        obj = self._build(data)
        if obj.id is None:
            obj.id = new_id()
        object_id = await self.dao.create(tenant.identifier, obj)
        if object_id is None:
            raise bad_request("Failed to create object.")
        await self.search.index(tenant.identifier, obj)
        await self.tenants.register_type(tenant, obj.type)
        logger.info("objects.created", app_id=tenant.identifier, type=obj.type, id=obj.id)
        return obj

    async def read(self, tenant: Tenant, object_id: str) -> DomainObject:
        obj = await self.dao.read(tenant.identifier, object_id)
        if obj is None:
            raise not_found(f"Object not found: {object_id}")
        return obj

    async def update(self, tenant: Tenant, object_id: str, payload: Any) -> DomainObject:
        """Merge ``payload`` into the stored object; unspecified fields are kept."""
        if not isinstance(payload, Mapping):
            raise bad_request("Invalid JSON object.")
        existing = await self.read(tenant, object_id)
        data = dict(existing)
        data.update({key: value for key, value in payload.items() if key not in PROTECTED_FIELDS})
        data["updated"] = timestamp()
        try:
            merged = self.types.model_for(existing.type).model_validate(data)
        except ValidationError as exc:
            raise bad_request(describe_validation_error(exc)) from exc
        await self.dao.update(tenant.identifier, merged)
        await self.search.index(tenant.identifier, merged)
        logger.info("objects.updated", app_id=tenant.identifier, type=merged.type, id=merged.id)
        return merged

    async def remove(self, tenant: Tenant, obj: DomainObject) -> None:
        """Delete ``obj`` together with the links it takes part in."""
        await self.graph.unlink_all(tenant.identifier, obj)
        await self.dao.delete(tenant.identifier, obj)
        await self.search.unindex(tenant.identifier, obj)
        logger.info("objects.deleted", app_id=tenant.identifier, type=obj.type, id=obj.id)

    async def delete(self, tenant: Tenant, type_name: str, object_id: str) -> None:
        obj = await self.dao.read(tenant.identifier, object_id)
        if obj is None or obj.type != type_name:
            raise not_found(f"Object not found: {object_id}")
        await self.remove(tenant, obj)


__all__ = ["CrudHandler", "PROTECTED_FIELDS", "describe_validation_error"]
