"""JWT utilities for user tokens scoped to a tenant.

Tokens are signed with a shared secret from configuration and carry the
user id in ``sub`` and the tenant identifier in ``appid``.
"""

from __future__ import annotations

# ============================================================================
# IMPORTS
# ============================================================================

import time
from collections.abc import Iterable
from typing import Any

from jose import JWTError, jwt

from ..config.settings import AppSettings, get_settings

# ============================================================================
# AUTHENTICATOR IMPLEMENTATION
# ============================================================================


class AuthenticationError(RuntimeError):
    """Raised when authentication fails."""


class JWTAuthenticator:
    """Issue and validate HMAC-signed user tokens.

    Attributes:
        algorithms: Acceptable signature algorithms.
        ttl_seconds: Lifetime of issued tokens.
    """

    def __init__(
        self,
        *,
        secret: str,
        algorithms: Iterable[str] = ("HS256",),
        ttl_seconds: int = 3600,
    ) -> None:
        self._secret = secret
        self.algorithms = tuple(algorithms)
        self.ttl_seconds = ttl_seconds

    def issue(self, *, subject: str, app_id: str, claims: dict[str, Any] | None = None) -> str:
        """Return a signed token for ``subject`` within tenant ``app_id``."""
        now = int(time.time())
        payload: dict[str, Any] = {
            **(claims or {}),
            "sub": subject,
            "appid": app_id,
            "iat": now,
            "exp": now + self.ttl_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithms[0])

    def authenticate(self, token: str) -> dict[str, Any]:
        """Validate the provided JWT and return decoded claims.

        Raises:
            AuthenticationError: When the signature, expiry or claims are invalid.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=list(self.algorithms))
        except JWTError as exc:
            raise AuthenticationError(str(exc)) from exc
        if not payload.get("sub") or not payload.get("appid"):
            raise AuthenticationError("Token missing 'sub' or 'appid' claim")
        return payload


# ============================================================================
# FACTORY
# ============================================================================


def build_authenticator(settings: AppSettings | None = None) -> JWTAuthenticator:
    cfg = (settings or get_settings()).security
    return JWTAuthenticator(
        secret=cfg.jwt_secret.get_secret_value(),
        algorithms=(cfg.jwt_algorithm,),
        ttl_seconds=cfg.token_ttl_seconds,
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["AuthenticationError", "JWTAuthenticator", "build_authenticator"]
