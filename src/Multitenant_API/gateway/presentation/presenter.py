"""JSON presenter implementation for REST responses.

Key Responsibilities:
    - Serialise domain objects, lists and mappings into JSON bodies
    - Render error envelopes ``{"code", "message"}``
    - Stamp correlation and timing headers from the request lifecycle

Collaborators:
    - Upstream: REST router endpoints and exception handlers
    - Downstream: FastAPI Response objects, lifecycle management

Thread Safety:
    - Thread-safe: Stateless presenter with no shared mutable state

Example:
    >>> presenter = JSONPresenter()
    >>> response = presenter.success({"items": [], "totalHits": 0})
"""

# ==============================================================================
# IMPORTS
# ==============================================================================

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel

from Multitenant_API.models import DomainObject
from Multitenant_API.utils.logging import get_correlation_id

from .errors import ErrorDetail, GatewayError
from .interface import ResponsePresenter
from .lifecycle import current_lifecycle

# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def _normalise_payload(data: Any) -> Any:
    """Convert models nested in lists and mappings into JSON-ready values."""
    if isinstance(data, DomainObject):
        return data.to_payload()
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, ErrorDetail):
        return data.as_json()
    if isinstance(data, Mapping):
        return {key: _normalise_payload(value) for key, value in data.items()}
    if isinstance(data, Iterable) and not isinstance(data, (str, bytes)):
        return [_normalise_payload(item) for item in data]
    return data


# ==============================================================================
# PRESENTER IMPLEMENTATION
# ==============================================================================


class JSONPresenter(ResponsePresenter):
    """Presenter producing bare JSON bodies and ``{code, message}`` errors."""

    media_type = "application/json"

    def __init__(self, *, correlation_header: str = "X-Correlation-ID") -> None:
        self._correlation_header = correlation_header

    def _finalise(self, response: Response, *, status_code: int) -> Response:
        lifecycle = current_lifecycle()
        if lifecycle:
            lifecycle.complete(status_code)
            correlation_id = lifecycle.correlation_id
        else:
            correlation_id = get_correlation_id()
        if self._correlation_header and correlation_id:
            response.headers.setdefault(self._correlation_header, correlation_id)
        if lifecycle:
            response.headers.setdefault("X-Response-Time-Ms", f"{lifecycle.duration_ms:.2f}")
        return response

    def success(
        self,
        data: Any,
        *,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        response = JSONResponse(
            _normalise_payload(data),
            status_code=status_code,
            media_type=self.media_type,
            headers=dict(headers or {}),
        )
        return self._finalise(response, status_code=status_code)

    def text(self, body: str, *, status_code: int = 200) -> Response:
        return self._finalise(PlainTextResponse(body, status_code=status_code), status_code=status_code)

    def empty(self, *, status_code: int = 200) -> Response:
        return self._finalise(Response(status_code=status_code), status_code=status_code)

    def error(self, detail: Any, *, status_code: int | None = None) -> Response:
        if isinstance(detail, GatewayError):
            detail = detail.detail
        if isinstance(detail, ErrorDetail):
            status = status_code or detail.status
            payload = {"code": status, "message": detail.message}
        else:
            status = status_code or 400
            payload = {"code": status, "message": str(detail)}
        response = JSONResponse(payload, status_code=status, media_type=self.media_type)
        return self._finalise(response, status_code=status)


# ==============================================================================
# EXPORTS
# ==============================================================================

__all__ = ["JSONPresenter", "_normalise_payload"]
