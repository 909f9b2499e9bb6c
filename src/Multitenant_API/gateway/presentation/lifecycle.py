"""Per-request bookkeeping shared by the middleware and the presenter.

Each request gets a :class:`RequestLifecycle` holding its correlation id and
start time. Whichever component produces the response completes it exactly
once, which records the request counter and latency histogram. Metrics are
labelled with the matched route template, never the concrete URL.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from Multitenant_API.observability.metrics import REQUEST_COUNTER, REQUEST_LATENCY
from Multitenant_API.utils.logging import bind_correlation_id, get_logger, reset_correlation_id

logger = get_logger(__name__)

UNMATCHED_ROUTE = "<unmatched>"

_lifecycle: ContextVar[RequestLifecycle | None] = ContextVar("request_lifecycle", default=None)


@dataclass(slots=True)
class RequestLifecycle:
    method: str
    path: str
    correlation_id: str = field(default_factory=lambda: str(uuid4()))
    started_at: float = field(default_factory=perf_counter)
    finished_at: float | None = None
    status_code: int | None = None
    scope: MutableMapping[str, Any] | None = field(default=None, repr=False)

    @property
    def route(self) -> str:
        """Template of the route that served the request."""
        if self.scope is None:
            return self.path
        return getattr(self.scope.get("route"), "path", None) or UNMATCHED_ROUTE

    def complete(self, status_code: int) -> None:
        """Record the outcome; later calls are ignored."""
        if self.status_code is not None:
            return
        self.status_code = status_code
        self.finished_at = perf_counter()
        REQUEST_COUNTER.labels(self.method, self.route, str(status_code)).inc()
        REQUEST_LATENCY.labels(self.method, self.route).observe(self.duration_ms / 1000)

    @property
    def duration_ms(self) -> float:
        end = self.finished_at if self.finished_at is not None else perf_counter()
        return max(end - self.started_at, 0.0) * 1000


def current_lifecycle() -> RequestLifecycle | None:
    return _lifecycle.get()


def push_lifecycle(lifecycle: RequestLifecycle) -> Token:
    return _lifecycle.set(lifecycle)


def pop_lifecycle(token: Token) -> None:
    _lifecycle.reset(token)


class RequestLifecycleMiddleware(BaseHTTPMiddleware):
    """Binds a lifecycle and correlation id around every request."""

    def __init__(self, app, *, correlation_header: str = "X-Correlation-ID") -> None:  # type: ignore[no-untyped-def]
        super().__init__(app)
        self.correlation_header = correlation_header

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        lifecycle = RequestLifecycle(
            method=request.method,
            path=request.url.path,
            correlation_id=request.headers.get(self.correlation_header) or str(uuid4()),
            scope=request.scope,
        )
        request.state.lifecycle = lifecycle
        correlation_token = bind_correlation_id(lifecycle.correlation_id)
        lifecycle_token = push_lifecycle(lifecycle)
        logger.info("gateway.request", extra={"method": lifecycle.method, "path": lifecycle.path})
        try:
            response = await call_next(request)
        except Exception:
            lifecycle.complete(500)
            logger.exception("gateway.request.error", extra={"path": lifecycle.path})
            raise
        finally:
            pop_lifecycle(lifecycle_token)
            reset_correlation_id(correlation_token)

        lifecycle.complete(response.status_code)
        response.headers.setdefault(self.correlation_header, lifecycle.correlation_id)
        response.headers.setdefault("X-Response-Time-Ms", f"{lifecycle.duration_ms:.2f}")
        logger.info(
            "gateway.response",
            extra={
                "method": lifecycle.method,
                "path": lifecycle.path,
                "route": lifecycle.route,
                "status_code": response.status_code,
                "duration_ms": round(lifecycle.duration_ms, 2),
            },
        )
        return response


__all__ = [
    "RequestLifecycle",
    "RequestLifecycleMiddleware",
    "UNMATCHED_ROUTE",
    "current_lifecycle",
    "pop_lifecycle",
    "push_lifecycle",
]
