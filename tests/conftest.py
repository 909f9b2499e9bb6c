from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from Multitenant_API.config.settings import AppSettings, get_settings
from Multitenant_API.gateway.app import create_app

JWT_TEST_SECRET = "test-signing-secret"


@pytest.fixture(autouse=True)
def _configure_environment(monkeypatch):
    monkeypatch.setenv("MT_ENV", "dev")
    monkeypatch.setenv("MT_SECURITY__JWT_SECRET", JWT_TEST_SECRET)
    monkeypatch.setenv("MT_SECURITY__CORS__ALLOW_ORIGINS", '["http://testserver"]')
    monkeypatch.setenv("MT_API__MAX_BATCH_SIZE", "10")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> AppSettings:
    return get_settings()


@pytest.fixture
def app(settings: AppSettings):
    return create_app(settings)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def credentials(client: TestClient) -> dict[str, str]:
    response = client.get("/v1/_setup")
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def auth_headers(credentials: dict[str, str]) -> dict[str, str]:
    return {"X-Access-Key": credentials["accessKey"], "X-API-Key": credentials["secretKey"]}


@pytest.fixture
def api(client: TestClient, auth_headers: dict[str, str]) -> TestClient:
    """Client sending root tenant credentials with every request."""
    client.headers.update(auth_headers)
    return client


@pytest.fixture
def anyio_backend():
    return "asyncio"
