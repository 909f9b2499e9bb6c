"""REST API router exposing the resource API.

Key Responsibilities:
    - Bind every method and path of the resource API to its handler
    - Resolve the tenant, then the canonical type, before invoking a handler
    - Render handler results through the response presenter

Collaborators:
    - Upstream: HTTP clients
    - Downstream: :class:`GatewayService` handlers

Route order matters: fixed system paths (``/_batch``, ``/_setup``,
``/utils/{method}`` ...) are declared before the generic ``/{type}`` routes so
they are never captured as type names.

Example:
    >>> from fastapi import FastAPI
    >>> app = FastAPI()
    >>> app.include_router(router, prefix="/v1")
"""

# ==============================================================================
# IMPORTS
# ==============================================================================

from __future__ import annotations

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response

from ...auth import SecurityContext, get_security_context
from ...models import Tenant
from ..handlers.custom import CustomResourceRegistry
from ..handlers.utilities import run_utility
from ..presentation.dependencies import get_response_presenter
from ..presentation.errors import ErrorDetail, GatewayError, bad_request, not_found
from ..presentation.interface import ResponsePresenter
from ..services import GatewayService, get_gateway_service

# ==============================================================================
# DEPENDENCIES
# ==============================================================================

PresenterDep = Annotated[ResponsePresenter, Depends(get_response_presenter)]
ServiceDep = Annotated[GatewayService, Depends(get_gateway_service)]
SecurityDep = Annotated[SecurityContext, Depends(get_security_context)]


def require_tenant(security: SecurityDep) -> Tenant:
    if security.tenant is None:
        raise not_found("App not found.")
    return security.tenant


TenantDep = Annotated[Tenant, Depends(require_tenant)]

router = APIRouter(tags=["resources"])
health_router = APIRouter(tags=["system"])


async def _read_json(request: Request) -> Any:
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError as exc:
        raise bad_request("Invalid JSON object.") from exc


# ==============================================================================
# HEALTH ENDPOINTS
# ==============================================================================


@health_router.get("/health", include_in_schema=True)
async def health_check() -> JSONResponse:
    return JSONResponse({"status": "ok"})


# ==============================================================================
# SYSTEM ENDPOINTS
# ==============================================================================


@router.get("/", response_model=None)
async def logo(tenant: TenantDep, service: ServiceDep, presenter: PresenterDep) -> Response:
    return presenter.text(service.settings.api.logo)


@router.post("/_batch", response_model=None)
async def batch_create(
    request: Request, tenant: TenantDep, service: ServiceDep, presenter: PresenterDep
) -> Response:
    results = await service.batch.create(tenant, await _read_json(request))
    return presenter.success(results)


@router.get("/_batch", response_model=None)
async def batch_read(
    request: Request, tenant: TenantDep, service: ServiceDep, presenter: PresenterDep
) -> Response:
    return presenter.success(await service.batch.read(tenant, request.query_params.getlist("ids")))


@router.put("/_batch", response_model=None)
async def batch_update(
    request: Request, tenant: TenantDep, service: ServiceDep, presenter: PresenterDep
) -> Response:
    results = await service.batch.update(tenant, await _read_json(request))
    return presenter.success(results)


@router.delete("/_batch", response_model=None)
async def batch_delete(
    request: Request, tenant: TenantDep, service: ServiceDep, presenter: PresenterDep
) -> Response:
    ids = request.query_params.getlist("ids")
    return presenter.success(await service.batch.delete(tenant, ids))


@router.get("/_setup", response_model=None)
async def setup(service: ServiceDep, presenter: PresenterDep) -> Response:
    return presenter.success(await service.tenants.setup())


@router.post("/_newkeys", response_model=None)
async def new_keys(tenant: TenantDep, service: ServiceDep, presenter: PresenterDep) -> Response:
    return presenter.success(await service.tenants.reset_credentials(tenant))


@router.get("/_types", response_model=None)
async def list_types(tenant: TenantDep, service: ServiceDep, presenter: PresenterDep) -> Response:
    return presenter.success(service.resolver.all_types(tenant))


@router.get("/_me", response_model=None)
async def me(security: SecurityDep, presenter: PresenterDep) -> Response:
    if security.user is not None:
        return presenter.success(security.user)
    if security.tenant is not None:
        return presenter.success(security.tenant)
    raise GatewayError(ErrorDetail(status=status.HTTP_401_UNAUTHORIZED, message="Unauthorized"))


@router.get("/_id/{id}", response_model=None)
async def read_by_id(
    id: str, tenant: TenantDep, service: ServiceDep, presenter: PresenterDep
) -> Response:
    return presenter.success(await service.crud.read(tenant, id))


@router.get("/utils", response_model=None)
async def utilities_by_query(request: Request, presenter: PresenterDep) -> Response:
    return presenter.success(run_utility(None, request.query_params))


@router.get("/utils/{method}", response_model=None)
async def utilities(method: str, request: Request, presenter: PresenterDep) -> Response:
    return presenter.success(run_utility(method, request.query_params))


@router.get("/search/{querytype}", response_model=None)
async def search_all(
    querytype: str,
    request: Request,
    tenant: TenantDep,
    service: ServiceDep,
    presenter: PresenterDep,
) -> Response:
    result = await service.dispatcher.dispatch(tenant, querytype, request.query_params)
    return presenter.success(result)


# ==============================================================================
# TYPE ENDPOINTS
# ==============================================================================


@router.get("/{type}", response_model=None)
async def search_type(
    type: str, request: Request, tenant: TenantDep, service: ServiceDep, presenter: PresenterDep
) -> Response:
    type_name = service.resolver.resolve(tenant, type)
    result = await service.dispatcher.dispatch(
        tenant, None, request.query_params, type_name
    )
    return presenter.success(result)


@router.get("/{type}/search/{querytype}", response_model=None)
async def search_type_by_query(
    type: str,
    querytype: str,
    request: Request,
    tenant: TenantDep,
    service: ServiceDep,
    presenter: PresenterDep,
) -> Response:
    type_name = service.resolver.resolve(tenant, type)
    result = await service.dispatcher.dispatch(
        tenant, querytype, request.query_params, type_name
    )
    return presenter.success(result)


@router.post("/{type}", response_model=None)
async def create_object(
    type: str, request: Request, tenant: TenantDep, service: ServiceDep, presenter: PresenterDep
) -> Response:
    type_name = service.resolver.resolve(tenant, type)
    obj = await service.crud.create(tenant, type_name, await _read_json(request))
    location = str(request.url_for("read_object", type=type, id=obj.id))
    return presenter.success(obj, status_code=status.HTTP_201_CREATED, headers={"Location": location})


@router.api_route("/{type}", methods=["PUT", "DELETE", "PATCH"], response_model=None)
async def unsupported_type_method(type: str, tenant: TenantDep, service: ServiceDep) -> Response:
    raise not_found(f"Type '{service.resolver.resolve(tenant, type)}' not found.")


@router.get("/{type}/{id}", response_model=None, name="read_object")
async def read_object(
    type: str, id: str, tenant: TenantDep, service: ServiceDep, presenter: PresenterDep
) -> Response:
    return presenter.success(await service.crud.read(tenant, id))


@router.put("/{type}/{id}", response_model=None)
async def update_object(
    type: str,
    id: str,
    request: Request,
    tenant: TenantDep,
    service: ServiceDep,
    presenter: PresenterDep,
) -> Response:
    return presenter.success(await service.crud.update(tenant, id, await _read_json(request)))


@router.delete("/{type}/{id}", response_model=None)
async def delete_object(
    type: str, id: str, tenant: TenantDep, service: ServiceDep, presenter: PresenterDep
) -> Response:
    await service.crud.delete(tenant, service.resolver.resolve(tenant, type), id)
    return presenter.empty()


@router.api_route("/{type}/{id}", methods=["POST", "PATCH"], response_model=None)
async def unsupported_object_method(
    type: str, id: str, tenant: TenantDep, service: ServiceDep
) -> Response:
    raise not_found(f"Type '{service.resolver.resolve(tenant, type)}' not found.")


# ==============================================================================
# LINK ENDPOINTS
# ==============================================================================


@router.get("/{type}/{id}/links/{type2}/{id2}", response_model=None)
async def is_linked(
    type: str,
    id: str,
    type2: str,
    id2: str,
    request: Request,
    tenant: TenantDep,
    service: ServiceDep,
    presenter: PresenterDep,
) -> Response:
    type2 = service.resolver.resolve(tenant, type2)
    result = await service.links.read(tenant, id, request.query_params, type2, id2)
    return presenter.success(result)


@router.get("/{type}/{id}/links/{type2}", response_model=None)
async def list_links(
    type: str,
    id: str,
    type2: str,
    request: Request,
    tenant: TenantDep,
    service: ServiceDep,
    presenter: PresenterDep,
) -> Response:
    type2 = service.resolver.resolve(tenant, type2)
    result = await service.links.read(tenant, id, request.query_params, type2)
    return presenter.success(result)


@router.get("/{type}/{id}/links", response_model=None)
async def list_links_by_query(
    type: str,
    id: str,
    request: Request,
    tenant: TenantDep,
    service: ServiceDep,
    presenter: PresenterDep,
) -> Response:
    result = await service.links.read(tenant, id, request.query_params)
    return presenter.success(result)


@router.post("/{type}/{id}/links/{id2}", response_model=None)
async def create_link(
    type: str,
    id: str,
    id2: str,
    request: Request,
    tenant: TenantDep,
    service: ServiceDep,
    presenter: PresenterDep,
) -> Response:
    return presenter.success(await service.links.create(tenant, id, request.query_params, id2))


@router.post("/{type}/{id}/links", response_model=None)
async def create_link_by_query(
    type: str,
    id: str,
    request: Request,
    tenant: TenantDep,
    service: ServiceDep,
    presenter: PresenterDep,
) -> Response:
    return presenter.success(await service.links.create(tenant, id, request.query_params))


@router.delete("/{type}/{id}/links/{type2}/{id2}", response_model=None)
async def delete_link(
    type: str,
    id: str,
    type2: str,
    id2: str,
    request: Request,
    tenant: TenantDep,
    service: ServiceDep,
    presenter: PresenterDep,
) -> Response:
    type2 = service.resolver.resolve(tenant, type2)
    await service.links.delete(tenant, id, request.query_params, type2, id2)
    return presenter.empty()


@router.delete("/{type}/{id}/links/{type2}", response_model=None)
async def delete_children(
    type: str,
    id: str,
    type2: str,
    request: Request,
    tenant: TenantDep,
    service: ServiceDep,
    presenter: PresenterDep,
) -> Response:
    type2 = service.resolver.resolve(tenant, type2)
    await service.links.delete(tenant, id, request.query_params, type2)
    return presenter.empty()


@router.delete("/{type}/{id}/links", response_model=None)
async def delete_all_links(
    type: str,
    id: str,
    request: Request,
    tenant: TenantDep,
    service: ServiceDep,
    presenter: PresenterDep,
) -> Response:
    await service.links.delete(tenant, id, request.query_params)
    return presenter.empty()


# ==============================================================================
# CUSTOM RESOURCES
# ==============================================================================


def build_custom_router(resources: CustomResourceRegistry) -> APIRouter:
    """Return a router forwarding each custom path to its handler."""
    custom_router = APIRouter(tags=["custom"])
    for path, handler in resources:
        for method, forward in (
            ("GET", handler.handle_get),
            ("POST", handler.handle_post),
            ("PUT", handler.handle_put),
            ("DELETE", handler.handle_delete),
        ):
            custom_router.add_api_route(
                f"/{path}",
                _forwarder(forward),
                methods=[method],
                response_model=None,
                name=f"custom:{method.lower()}:{path}",
            )
    return custom_router


def _forwarder(forward):
    async def endpoint(request: Request, presenter: PresenterDep) -> Response:
        result = await forward(request)
        if isinstance(result, Response):
            return result
        return presenter.success(result)

    return endpoint


# ==============================================================================
# EXPORTS
# ==============================================================================

__all__ = ["build_custom_router", "health_router", "require_tenant", "router"]
