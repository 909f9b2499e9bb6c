"""Authentication and tenant management utilities."""

from .api_keys import APIKey, APIKeyManager, build_api_key_manager
from .context import ANONYMOUS, SecurityContext
from .dependencies import get_security_context
from .jwt import AuthenticationError, JWTAuthenticator, build_authenticator
from .tenants import TenantDirectory

__all__ = [
    "ANONYMOUS",
    "APIKey",
    "APIKeyManager",
    "AuthenticationError",
    "JWTAuthenticator",
    "SecurityContext",
    "TenantDirectory",
    "build_api_key_manager",
    "build_authenticator",
    "get_security_context",
]
