"""Non-atomic batch create, read, update and delete.

Items run concurrently and independently: the response holds one entry per
input item, in input order, and a failing item yields a ``{code, message}``
entry without affecting the others.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Sequence
from typing import Any

import structlog

from Multitenant_API.models import DomainObject, Tenant
from Multitenant_API.observability.metrics import record_batch_item
from Multitenant_API.storage import StorageError

from ..presentation.errors import ErrorDetail, GatewayError, bad_request, not_found
from .crud import CrudHandler
from .types import TypeResolver

logger = structlog.get_logger(__name__)

BatchEntry = DomainObject | dict[str, Any]


class BatchHandler:
    """Fans batch requests out to :class:`CrudHandler`."""

    def __init__(
        self, crud: CrudHandler, resolver: TypeResolver, *, max_batch_size: int = 100
    ) -> None:
        self.crud = crud
        self.resolver = resolver
        self.max_batch_size = max_batch_size

    def _check_size(self, size: int) -> None:
        if size > self.max_batch_size:
            raise bad_request(f"Batch size exceeds the maximum of {self.max_batch_size} items.")

    def _require_array(self, payload: Any) -> list[Any]:
        if not isinstance(payload, list):
            raise bad_request("Batch request must be a JSON array.")
        self._check_size(len(payload))
        return payload

    async def _guard(self, operation: str, call: Awaitable[BatchEntry]) -> BatchEntry:
        try:
            result = await call
        except GatewayError as exc:
            record_batch_item(operation, ok=False)
            return exc.detail.as_json()
        except StorageError as exc:
            record_batch_item(operation, ok=False)
            logger.error("batch.item_failed", operation=operation, error=str(exc))
            return ErrorDetail(status=500, message="Internal server error").as_json()
        record_batch_item(operation, ok=True)
        return result

    async def _run(self, operation: str, calls: Sequence[Awaitable[BatchEntry]]) -> list[BatchEntry]:
        results = await asyncio.gather(*(self._guard(operation, call) for call in calls))
        logger.debug("batch.completed", operation=operation, items=len(results))
        return list(results)

    async def _create_one(self, tenant: Tenant, item: Any) -> DomainObject:
        if not isinstance(item, dict):
            raise bad_request("Invalid JSON object.")
        type_segment = item.get("type")
        if not isinstance(type_segment, str) or not type_segment.strip():
            raise bad_request("Parameter 'type' is missing.")
        return await self.crud.create(tenant, self.resolver.resolve(tenant, type_segment), item)

    async def create(self, tenant: Tenant, payload: Any) -> list[BatchEntry]:
        items = self._require_array(payload)
        return await self._run("create", [self._create_one(tenant, item) for item in items])

    async def read(self, tenant: Tenant, ids: Sequence[str]) -> list[DomainObject]:
        self._check_size(len(ids))
        found = await self.crud.dao.read_all(tenant.identifier, list(ids))
        return list(found.values())

    async def _update_one(self, tenant: Tenant, item: Any) -> DomainObject:
        if not isinstance(item, dict):
            raise bad_request("Invalid JSON object.")
        object_id = item.get("id")
        if object_id is None or not str(object_id).strip():
            raise bad_request("Parameter 'id' is missing.")
        return await self.crud.update(tenant, str(object_id), item)

    async def update(self, tenant: Tenant, payload: Any) -> list[BatchEntry]:
        items = self._require_array(payload)
        return await self._run("update", [self._update_one(tenant, item) for item in items])

    async def _delete_one(self, tenant: Tenant, object_id: str) -> dict[str, Any]:
        obj = await self.crud.dao.read(tenant.identifier, object_id)
        if obj is None:
            raise not_found(f"Object not found: {object_id}")
        await self.crud.remove(tenant, obj)
        return {"id": object_id, "deleted": True}

    async def delete(self, tenant: Tenant, ids: Sequence[str]) -> list[BatchEntry]:
        self._check_size(len(ids))
        return await self._run("delete", [self._delete_one(tenant, object_id) for object_id in ids])


__all__ = ["BatchHandler"]
