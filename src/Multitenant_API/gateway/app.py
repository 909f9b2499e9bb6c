"""FastAPI application wiring the resource API.

Key Responsibilities:
    - Application initialization and configuration
    - Middleware setup (request lifecycle, CORS)
    - Error handling and translation into ``{"code", "message"}`` envelopes
    - Health and metrics endpoints

Collaborators:
    - Upstream: ASGI server (Uvicorn, Gunicorn)
    - Downstream: REST router, :class:`GatewayService`

Side Effects:
    - Configures logging on startup
    - Registers Prometheus metrics endpoint

Example:
    >>> from Multitenant_API.gateway.app import create_app
    >>> app = create_app()
    >>> # Run with: uvicorn --factory Multitenant_API.gateway.app:create_app
"""

# ==============================================================================
# IMPORTS
# ==============================================================================

from __future__ import annotations

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config.settings import AppSettings, get_settings
from ..observability import setup_observability
from ..storage import ObjectDAO, SearchIndex
from ..utils.logging import get_correlation_id, get_logger
from .handlers.custom import CustomResourceRegistry
from .presentation.errors import ErrorDetail, GatewayError
from .presentation.lifecycle import RequestLifecycleMiddleware, current_lifecycle
from .rest.router import build_custom_router, health_router
from .rest.router import router as rest_router
from .services import build_gateway_service

# ==============================================================================
# ERROR HANDLING
# ==============================================================================

logger = get_logger(__name__)


def create_error_response(detail: ErrorDetail) -> JSONResponse:
    """Create the JSON error envelope for ``detail``."""
    lifecycle = current_lifecycle()
    if lifecycle:
        lifecycle.complete(detail.status)
    return JSONResponse(detail.as_json(), status_code=detail.status)


def _log_problem(event: str, detail: ErrorDetail) -> None:
    logger.warning(
        event,
        extra={"correlation_id": get_correlation_id(), "problem": detail.as_json()},
    )


# ==============================================================================
# APPLICATION FACTORY
# ==============================================================================


def create_app(
    settings: AppSettings | None = None,
    *,
    dao: ObjectDAO | None = None,
    search: SearchIndex | None = None,
    custom_resources: CustomResourceRegistry | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Multitenant API", version=__version__, debug=settings.debug)
    app.state.settings = settings

    setup_observability(app, settings)

    service = build_gateway_service(
        settings, dao=dao, search=search, custom_resources=custom_resources
    )
    app.state.service = service
    app.state.tenants = service.tenants
    app.state.authenticator = service.authenticator

    app.add_middleware(
        RequestLifecycleMiddleware,
        correlation_header=settings.observability.logging.correlation_id_header,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.security.cors.allow_origins),
        allow_methods=list(settings.security.cors.allow_methods),
        allow_headers=list(settings.security.cors.allow_headers),
    )

    app.include_router(health_router)
    if settings.api.enabled:
        api = APIRouter()
        api.include_router(build_custom_router(service.custom_resources))
        api.include_router(rest_router)
        app.include_router(api, prefix=settings.api.base_path)
    else:
        logger.info("gateway.api.disabled")

    @app.exception_handler(GatewayError)
    async def handle_gateway_error(_: Request, exc: GatewayError) -> JSONResponse:
        _log_problem("gateway.error", exc.detail)
        return create_error_response(exc.detail)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(_: Request, exc: HTTPException) -> JSONResponse:
        detail = ErrorDetail(status=exc.status_code, message=str(exc.detail))
        _log_problem("gateway.http_error", detail)
        return create_error_response(detail)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_exception(_: Request, exc: RequestValidationError) -> JSONResponse:
        detail = ErrorDetail(status=400, message="Request validation failed")
        logger.warning(
            "gateway.validation_error",
            extra={"correlation_id": get_correlation_id(), "errors": exc.errors()},
        )
        return create_error_response(detail)

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("gateway.unhandled_error", exc_info=exc)
        return create_error_response(ErrorDetail(status=500, message="Internal server error"))

    return app


# ==============================================================================
# EXPORTS
# ==============================================================================

__all__ = ["create_app", "create_error_response"]
