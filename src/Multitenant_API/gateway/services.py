"""Gateway service layer.

Wires the ports, the tenant directory and the handlers into one object that
is created per application and reached from routes via ``app.state``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog
from fastapi import Request

from Multitenant_API.auth import (
    APIKeyManager,
    JWTAuthenticator,
    TenantDirectory,
    build_api_key_manager,
    build_authenticator,
)
from Multitenant_API.config.settings import AppSettings, get_settings
from Multitenant_API.models import ObjectTypeRegistry, registry
from Multitenant_API.storage import (
    InMemoryDAO,
    InMemorySearchIndex,
    LinkGraph,
    ObjectDAO,
    SearchIndex,
)

from .handlers import (
    BatchHandler,
    CrudHandler,
    CustomResourceRegistry,
    LinkGraphHandler,
    QueryDispatcher,
    TypeResolver,
)

logger = structlog.get_logger(__name__)


@dataclass
class GatewayService:
    """Handlers and collaborators shared by every request of an application."""

    settings: AppSettings
    dao: ObjectDAO
    search: SearchIndex
    tenants: TenantDirectory
    authenticator: JWTAuthenticator
    resolver: TypeResolver
    dispatcher: QueryDispatcher
    crud: CrudHandler
    batch: BatchHandler
    links: LinkGraphHandler
    custom_resources: CustomResourceRegistry = field(default_factory=CustomResourceRegistry)


def build_gateway_service(
    settings: AppSettings | None = None,
    *,
    dao: ObjectDAO | None = None,
    search: SearchIndex | None = None,
    api_keys: APIKeyManager | None = None,
    types: ObjectTypeRegistry | None = None,
    custom_resources: CustomResourceRegistry | None = None,
) -> GatewayService:
    """Assemble a :class:`GatewayService`; in-memory ports are the default."""
    settings = settings or get_settings()
    dao = dao or InMemoryDAO()
    search = search or InMemorySearchIndex()
    types = types or registry
    separator = settings.tenancy.separator

    tenants = TenantDirectory(
        dao,
        search,
        api_keys or build_api_key_manager(settings),
        tenancy=settings.tenancy,
        types=types,
    )
    resolver = TypeResolver(types)
    dispatcher = QueryDispatcher(
        search, resolver=resolver, pager=settings.pager, separator=separator
    )
    graph = LinkGraph(dao, search, separator=separator)
    crud = CrudHandler(dao, search, tenants, types=types, graph=graph)
    service = GatewayService(
        settings=settings,
        dao=dao,
        search=search,
        tenants=tenants,
        authenticator=build_authenticator(settings),
        resolver=resolver,
        dispatcher=dispatcher,
        crud=crud,
        batch=BatchHandler(crud, resolver, max_batch_size=settings.api.max_batch_size),
        links=LinkGraphHandler(graph, dispatcher),
        custom_resources=(
            custom_resources if custom_resources is not None else CustomResourceRegistry()
        ),
    )
    logger.debug(
        "gateway.service.built",
        dao=type(dao).__name__,
        search=type(search).__name__,
        custom_resources=len(service.custom_resources),
    )
    return service


def get_gateway_service(request: Request) -> GatewayService:
    """Return the service bound to the running application."""
    return request.app.state.service


__all__ = ["GatewayService", "build_gateway_service", "get_gateway_service"]
