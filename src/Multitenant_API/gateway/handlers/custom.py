"""Registry of custom resource handlers mounted next to the generic API.

Operators register handlers at startup; each handler is served at its
declared relative path for GET, POST, PUT and DELETE. The router forwards the
raw request and returns whatever response the handler produces.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable

from fastapi import Request


@runtime_checkable
class CustomResourceHandler(Protocol):
    """Opaque handler for a custom resource path (e.g. ``"reports/{name}"``)."""

    relative_path: str

    async def handle_get(self, request: Request) -> Any: ...

    async def handle_post(self, request: Request) -> Any: ...

    async def handle_put(self, request: Request) -> Any: ...

    async def handle_delete(self, request: Request) -> Any: ...


class CustomResourceRegistry:
    """Ordered collection of custom handlers keyed by relative path."""

    def __init__(self) -> None:
        self._handlers: dict[str, CustomResourceHandler] = {}

    def register(self, handler: CustomResourceHandler) -> None:
        path = handler.relative_path.strip("/")
        if not path:
            raise ValueError("Custom resource handlers need a non-empty relative path")
        if path in self._handlers:
            raise ValueError(f"Custom resource '{path}' is already registered")
        self._handlers[path] = handler

    def get(self, relative_path: str) -> CustomResourceHandler | None:
        return self._handlers.get(relative_path.strip("/"))

    def __iter__(self) -> Iterator[tuple[str, CustomResourceHandler]]:
        return iter(self._handlers.items())

    def __len__(self) -> int:
        return len(self._handlers)


__all__ = ["CustomResourceHandler", "CustomResourceRegistry"]
