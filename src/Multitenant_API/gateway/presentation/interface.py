"""Presentation layer interfaces for HTTP payload shaping.

Route handlers depend on :class:`ResponsePresenter` rather than on a concrete
response class, so the envelope format can change without touching them.
"""

# ==============================================================================
# IMPORTS
# ==============================================================================

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from fastapi import Response

# ==============================================================================
# PRESENTATION PROTOCOLS
# ==============================================================================


class ResponsePresenter(Protocol):
    """Protocol describing presentation responsibilities for route handlers."""

    def success(
        self,
        data: Any,
        *,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Render a successful response with the given payload."""

    def text(self, body: str, *, status_code: int = 200) -> Response:
        """Render a plain-text response."""

    def empty(self, *, status_code: int = 200) -> Response:
        """Render a response without a body."""

    def error(self, detail: Any, *, status_code: int | None = None) -> Response:
        """Render an error payload in the transport format."""


# ==============================================================================
# EXPORTS
# ==============================================================================

__all__ = ["ResponsePresenter"]
