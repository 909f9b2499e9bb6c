"""Tests for custom resource handlers mounted next to the resource API."""

from __future__ import annotations

import pytest
from fastapi import Request
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from Multitenant_API.gateway.app import create_app
from Multitenant_API.gateway.handlers.custom import CustomResourceHandler, CustomResourceRegistry


class ReportsHandler:
    relative_path = "/reports"

    def __init__(self) -> None:
        self.posted: list[dict] = []

    async def handle_get(self, request: Request):
        return {"reports": len(self.posted), "format": request.query_params.get("format", "json")}

    async def handle_post(self, request: Request):
        self.posted.append(await request.json())
        return {"stored": True}

    async def handle_put(self, request: Request):
        return PlainTextResponse("replaced", status_code=202)

    async def handle_delete(self, request: Request):
        self.posted.clear()
        return None


def test_registry_validates_paths() -> None:
    registry = CustomResourceRegistry()
    handler = ReportsHandler()
    assert isinstance(handler, CustomResourceHandler)
    registry.register(handler)
    assert registry.get("reports") is handler
    assert len(registry) == 1
    with pytest.raises(ValueError):
        registry.register(ReportsHandler())

    empty = ReportsHandler()
    empty.relative_path = "/"
    with pytest.raises(ValueError):
        registry.register(empty)


def test_custom_handlers_take_precedence(settings) -> None:
    handler = ReportsHandler()
    resources = CustomResourceRegistry()
    resources.register(handler)
    with TestClient(create_app(settings, custom_resources=resources)) as client:
        assert client.post("/v1/reports", json={"title": "Q1"}).json() == {"stored": True}
        assert client.get("/v1/reports", params={"format": "csv"}).json() == {
            "reports": 1,
            "format": "csv",
        }
        replaced = client.put("/v1/reports")
        assert replaced.status_code == 202
        assert replaced.text == "replaced"
        deleted = client.delete("/v1/reports")
        assert deleted.status_code == 200
        assert deleted.json() is None
    assert handler.posted == []
