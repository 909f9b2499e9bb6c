"""Tenant (application) model used for multi-tenancy."""

from __future__ import annotations

from pydantic import Field

from .objects import DomainObject

TENANT_TYPE = "app"
TENANT_ID_PREFIX = "app:"


class Tenant(DomainObject):
    """An isolated namespace owning objects, type aliases and credentials.

    The record lives in the root tenant's namespace under ``app:<identifier>``.
    Only a hash of the secret key is kept; the plaintext is handed out once by
    the credential flows in :mod:`Multitenant_API.auth.tenants`.
    """

    type: str = TENANT_TYPE
    name: str
    shared: bool = False
    active: bool = True
    datatypes: dict[str, str] = Field(default_factory=dict)
    secret_hash: str | None = Field(default=None, exclude=True, repr=False)

    @classmethod
    def record_id(cls, identifier: str) -> str:
        return identifier if identifier.startswith(TENANT_ID_PREFIX) else TENANT_ID_PREFIX + identifier

    @property
    def identifier(self) -> str:
        """Tenant identifier used as ``appid`` of every tenant object."""
        object_id = self.id or ""
        return object_id[len(TENANT_ID_PREFIX):] if object_id.startswith(TENANT_ID_PREFIX) else object_id
