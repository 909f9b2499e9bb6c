"""Tenant credential generation and verification.

Key Responsibilities:
    - Generate cryptographically random secret keys for tenants
    - Hash secrets with a configurable ``hashlib`` algorithm before storage
    - Verify presented secrets against stored hashes in constant time

Collaborators:
    - Upstream: :class:`Multitenant_API.auth.tenants.TenantDirectory`
    - Downstream: ``hashlib`` and ``secrets``

Side Effects:
    - None; hashes are persisted by the caller.

Example:
    >>> manager = APIKeyManager()
    >>> key = manager.generate(tenant_id="demo")
    >>> manager.verify(key.raw_secret, key.hashed_secret)
    True
"""

from __future__ import annotations

# ============================================================================
# IMPORTS
# ============================================================================
import hashlib
import hmac
import secrets
from dataclasses import dataclass

from ..config.settings import AppSettings, get_settings

SECRET_NOTICE = "Save the secret key! It is showed only once!"

# ============================================================================
# DATA MODELS
# ============================================================================


@dataclass(frozen=True)
class APIKey:
    """Credential pair issued to a tenant.

    Attributes:
        tenant_id: Tenant identifier, also used as the access key.
        raw_secret: Plaintext secret returned to the caller exactly once.
        hashed_secret: Digest stored on the tenant record.
    """

    tenant_id: str
    raw_secret: str
    hashed_secret: str

    def as_credentials(self) -> dict[str, str]:
        """Return the payload handed to the caller after setup or rotation."""
        return {
            "accessKey": self.tenant_id,
            "secretKey": self.raw_secret,
            "info": SECRET_NOTICE,
        }


# ============================================================================
# MANAGER IMPLEMENTATION
# ============================================================================


class APIKeyManager:
    """Generate and verify tenant secret keys.

    Attributes:
        hashing_algorithm: Name of the ``hashlib`` algorithm used for
            storing secrets.
    """

    def __init__(self, *, hashing_algorithm: str = "sha256") -> None:
        self.hashing_algorithm = hashing_algorithm

    def generate(self, *, tenant_id: str) -> APIKey:
        """Create a fresh secret for ``tenant_id``.

        Returns:
            ``APIKey`` with the plaintext secret and its hash. Only the hash
            may be persisted.
        """
        raw_secret = secrets.token_urlsafe(32)
        return APIKey(tenant_id=tenant_id, raw_secret=raw_secret, hashed_secret=self._hash(raw_secret))

    def verify(self, provided_secret: str | None, hashed_secret: str | None) -> bool:
        """Return ``True`` when ``provided_secret`` matches ``hashed_secret``."""
        if not provided_secret or not hashed_secret:
            return False
        return hmac.compare_digest(self._hash(provided_secret), hashed_secret)

    def _hash(self, value: str) -> str:
        """Hash the provided secret using the configured algorithm.

        Raises:
            ValueError: If the configured algorithm is unsupported.
        """
        algorithm = getattr(hashlib, self.hashing_algorithm, None)
        if not algorithm:
            raise ValueError(f"Unsupported hashing algorithm {self.hashing_algorithm}")
        return algorithm(value.encode("utf-8")).hexdigest()


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================


def build_api_key_manager(settings: AppSettings | None = None) -> APIKeyManager:
    settings = settings or get_settings()
    return APIKeyManager(hashing_algorithm=settings.security.hashing_algorithm)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["APIKey", "APIKeyManager", "SECRET_NOTICE", "build_api_key_manager"]
