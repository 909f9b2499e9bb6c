"""Tenant provisioning, credential rotation and alias registration.

Key Responsibilities:
    - Create the root tenant on first setup and hand out its credentials once
    - Rotate tenant secrets so that the previous secret stops authenticating
    - Register plural aliases for tenant-defined types as they are created
    - Authenticate access/secret key pairs

Collaborators:
    - Upstream: principal resolution dependencies and the gateway service
    - Downstream: :class:`ObjectDAO` and :class:`SearchIndex` of the root tenant,
      :class:`APIKeyManager` for hashing

Thread Safety:
    - Read-modify-write of tenant records is serialised with an ``asyncio.Lock``.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from Multitenant_API.config.settings import TenancySettings
from Multitenant_API.models import ObjectTypeRegistry, Tenant, registry
from Multitenant_API.storage import ObjectDAO, SearchIndex
from Multitenant_API.utils.identifiers import timestamp
from Multitenant_API.utils.text import pluralize

from .api_keys import APIKey, APIKeyManager

logger = structlog.get_logger(__name__)


class TenantDirectory:
    """Registry of tenants stored as ``app`` objects in the root namespace."""

    def __init__(
        self,
        dao: ObjectDAO,
        search: SearchIndex,
        api_keys: APIKeyManager,
        *,
        tenancy: TenancySettings | None = None,
        types: ObjectTypeRegistry | None = None,
    ) -> None:
        self.dao = dao
        self.search = search
        self.api_keys = api_keys
        self.tenancy = tenancy or TenancySettings()
        self.types = types or registry
        self._lock = asyncio.Lock()

    @property
    def root_id(self) -> str:
        return self.tenancy.root_tenant_id

    async def get(self, identifier: str | None) -> Tenant | None:
        if not identifier:
            return None
        stored = await self.dao.read(self.root_id, Tenant.record_id(identifier))
        if stored is None:
            return None
        if isinstance(stored, Tenant):
            return stored
        return Tenant.model_validate(stored.model_dump())

    async def _save(self, tenant: Tenant) -> None:
        tenant.updated = timestamp()
        await self.dao.update(self.root_id, tenant)
        await self.search.index(self.root_id, tenant)

    async def create(
        self, identifier: str, name: str, *, shared: bool = False
    ) -> tuple[Tenant, APIKey]:
        """Persist a new tenant and return it with its freshly issued key."""
        key = self.api_keys.generate(tenant_id=identifier)
        tenant = Tenant(
            id=Tenant.record_id(identifier),
            appid=self.root_id,
            name=name,
            shared=shared,
            timestamp=timestamp(),
            secret_hash=key.hashed_secret,
        )
        await self.dao.create(self.root_id, tenant)
        await self.search.index(self.root_id, tenant)
        logger.info("tenants.created", app_id=identifier, shared=shared)
        return tenant, key

    async def setup(self) -> dict[str, Any]:
        """Create the root tenant unless it already exists."""
        async with self._lock:
            if await self.get(self.root_id) is not None:
                return {"code": 200, "message": "All set!"}
            _, key = await self.create(self.root_id, self.tenancy.root_tenant_name, shared=False)
        return key.as_credentials()

    async def reset_credentials(self, tenant: Tenant) -> dict[str, str]:
        """Issue a new secret for ``tenant``; the old one stops working."""
        async with self._lock:
            current = await self.get(tenant.identifier) or tenant
            key = self.api_keys.generate(tenant_id=current.identifier)
            current.secret_hash = key.hashed_secret
            await self._save(current)
        logger.info("tenants.credentials_reset", app_id=current.identifier)
        return key.as_credentials()

    async def authenticate(self, access_key: str | None, secret_key: str | None) -> Tenant | None:
        tenant = await self.get(access_key)
        if tenant is None or not tenant.active:
            return None
        if not self.api_keys.verify(secret_key, tenant.secret_hash):
            return None
        return tenant

    async def register_type(self, tenant: Tenant, type_name: str) -> None:
        """Add the plural alias of a tenant-defined type to the alias map."""
        if self.types.is_core(type_name):
            return
        plural = pluralize(type_name)
        if tenant.datatypes.get(plural) == type_name:
            return
        async with self._lock:
            current = await self.get(tenant.identifier) or tenant
            if current.datatypes.get(plural) != type_name:
                current.datatypes[plural] = type_name
                await self._save(current)
                logger.debug("tenants.type_registered", app_id=tenant.identifier, alias=plural)
        tenant.datatypes[plural] = type_name


__all__ = ["TenantDirectory"]
