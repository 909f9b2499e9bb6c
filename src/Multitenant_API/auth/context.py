"""Security context describing the principal of the current request.

The context is derived from tenant credentials or from a signed user token.
Handlers read the tenant from it to scope every persistence and search call.
"""

from __future__ import annotations

# ============================================================================
# IMPORTS
# ============================================================================

from collections.abc import Mapping
from dataclasses import dataclass, field

from Multitenant_API.models import DomainObject, Tenant

# ============================================================================
# DATA MODELS
# ============================================================================


@dataclass(frozen=True)
class SecurityContext:
    """Represents the authenticated principal for the current request.

    Attributes:
        tenant: Tenant owning the request, ``None`` for anonymous calls.
        user: User resolved from a bearer token, if any.
        auth_type: ``"api_key"``, ``"jwt"`` or ``"anonymous"``.
        claims: Decoded token claims for ``"jwt"`` contexts.

    Example:
        >>> context = SecurityContext(tenant=Tenant(id="app:demo", name="Demo"))
        >>> context.app_id
        'demo'
    """

    tenant: Tenant | None = None
    user: DomainObject | None = None
    auth_type: str = "anonymous"
    claims: Mapping[str, object] = field(default_factory=dict)

    @property
    def app_id(self) -> str | None:
        """Identifier of the tenant namespace, if a tenant is bound."""
        return self.tenant.identifier if self.tenant is not None else None


ANONYMOUS = SecurityContext()

# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["ANONYMOUS", "SecurityContext"]
