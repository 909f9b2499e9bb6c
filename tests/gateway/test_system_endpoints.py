"""Tests for setup, credentials, principal, utility and health routes."""

from fastapi.testclient import TestClient

from Multitenant_API.auth.api_keys import SECRET_NOTICE


def test_setup_returns_credentials_once(client: TestClient) -> None:
    first = client.get("/v1/_setup")
    assert first.status_code == 200
    body = first.json()
    assert body["accessKey"] == "root"
    assert body["secretKey"]
    assert body["info"] == SECRET_NOTICE

    assert client.get("/v1/_setup").json() == {"code": 200, "message": "All set!"}


def test_logo_requires_tenant(client: TestClient, auth_headers) -> None:
    assert client.get("/v1/").status_code == 404
    response = client.get("/v1/", headers=auth_headers)
    assert response.status_code == 200
    assert response.text == "Multitenant API v1"


def test_new_keys_rotates_secret(client: TestClient, auth_headers) -> None:
    response = client.post("/v1/_newkeys", headers=auth_headers)
    assert response.status_code == 200
    rotated = response.json()
    assert rotated["accessKey"] == "root"
    assert rotated["secretKey"] != auth_headers["X-API-Key"]

    assert client.get("/v1/_types", headers=auth_headers).status_code == 401
    new_headers = {"X-Access-Key": "root", "X-API-Key": rotated["secretKey"]}
    assert client.get("/v1/_types", headers=new_headers).status_code == 200


def test_me_returns_tenant_or_user(app, client: TestClient, auth_headers) -> None:
    assert client.get("/v1/_me").json() == {"code": 401, "message": "Unauthorized"}

    tenant = client.get("/v1/_me", headers=auth_headers).json()
    assert tenant["id"] == "app:root"
    assert "secret_hash" not in tenant

    user = client.post("/v1/users", json={"email": "ann@example.org"}, headers=auth_headers).json()
    token = app.state.authenticator.issue(subject=user["id"], app_id="root")
    me = client.get("/v1/_me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == user["id"]


def test_bearer_token_failures(app, client: TestClient, credentials) -> None:
    response = client.get("/v1/_me", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401

    token = app.state.authenticator.issue(subject="u1", app_id="unknown")
    response = client.get("/v1/_me", headers={"Authorization": f"Bearer {token}"})
    assert response.json() == {"code": 401, "message": "Unknown app"}


def test_types_lists_core_aliases(api: TestClient) -> None:
    types = api.get("/v1/_types").json()
    assert types["users"] == "user"
    assert types["tags"] == "tag"
    assert types["addresses"] == "address"


def test_utilities(client: TestClient) -> None:
    assert client.get("/v1/utils/newid").json().isdigit()
    assert isinstance(client.get("/v1/utils/timestamp").json(), int)
    assert client.get("/v1/utils/timeago", params={"delta": 7_200_000}).json() == "2 hours"
    assert client.get("/v1/utils/nospaces", params={"string": "a b  c", "replacement": "_"}).json() == "a_b_c"
    assert client.get("/v1/utils/nosymbols", params={"string": "a-b!c"}).json() == "a b c"
    message = client.get(
        "/v1/utils/formatmessage", params=[("message", "{0} + {1}"), ("fields", "1"), ("fields", "2")]
    )
    assert message.json() == "1 + 2"
    assert len(client.get("/v1/utils/formatdate", params={"format": "%Y"}).json()) == 4
    assert client.get("/v1/utils/md2html", params={"md": "**x**"}).json() == "<p><strong>x</strong></p>"
    assert client.get("/v1/utils", params={"method": "newid"}).status_code == 200


def test_unknown_utility(client: TestClient) -> None:
    response = client.get("/v1/utils/bogus")
    assert response.status_code == 400
    assert response.json() == {"code": 400, "message": "Unknown method: bogus"}
    assert client.get("/v1/utils").json()["message"] == "Unknown method: empty"


def test_health_and_metrics(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
    client.get("/v1/utils/newid")
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "http_requests_total" in metrics.text


def test_correlation_header_is_propagated(client: TestClient) -> None:
    response = client.get("/v1/utils/newid", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert "X-Response-Time-Ms" in response.headers
    generated = client.get("/v1/utils/newid")
    assert generated.headers["X-Correlation-ID"]
