"""FastAPI dependencies resolving the principal of a request.

Tenant credentials travel in two headers (access key and secret key, names
configurable); user tokens travel as ``Authorization: Bearer <jwt>``. Requests
without credentials resolve to an anonymous context, leaving it to each
endpoint to decide whether a tenant is required.
"""

from __future__ import annotations

# ============================================================================
# IMPORTS
# ============================================================================

from fastapi import Depends, Header, HTTPException, Request, status

from .context import ANONYMOUS, SecurityContext
from .jwt import AuthenticationError, JWTAuthenticator
from .tenants import TenantDirectory

# ============================================================================
# DEPENDENCY FACTORIES
# ============================================================================


def _get_tenant_directory(request: Request) -> TenantDirectory:
    return request.app.state.tenants


def _get_authenticator(request: Request) -> JWTAuthenticator:
    return request.app.state.authenticator


# ============================================================================
# AUTHENTICATION HELPERS
# ============================================================================


async def get_security_context(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
    tenants: TenantDirectory = Depends(_get_tenant_directory),
    authenticator: JWTAuthenticator = Depends(_get_authenticator),
) -> SecurityContext:
    """Authenticate the incoming request and populate :class:`SecurityContext`.

    Raises:
        HTTPException: 401 when credentials are present but invalid.
    """
    security = request.app.state.settings.security
    access_key = request.headers.get(security.access_key_header)
    secret_key = request.headers.get(security.secret_key_header)

    if access_key or secret_key:
        tenant = await tenants.authenticate(access_key, secret_key)
        if tenant is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
            )
        context = SecurityContext(tenant=tenant, auth_type="api_key")
    elif authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
        try:
            claims = authenticator.authenticate(token)
        except AuthenticationError as exc:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
        tenant = await tenants.get(str(claims["appid"]))
        if tenant is None or not tenant.active:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown app")
        user = await tenants.dao.read(tenant.identifier, str(claims["sub"]))
        context = SecurityContext(tenant=tenant, user=user, auth_type="jwt", claims=claims)
    else:
        context = ANONYMOUS

    request.state.security_context = context
    return context


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["get_security_context"]
