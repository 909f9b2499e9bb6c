"""End-to-end tests for object create, read, update, delete and search routes."""

from fastapi.testclient import TestClient


def _create_user(api: TestClient, **fields) -> dict:
    payload = {"name": "Ann", "email": "ann@example.org", **fields}
    response = api.post("/v1/users", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_requests_without_tenant_are_rejected(client: TestClient) -> None:
    response = client.get("/v1/users")
    assert response.status_code == 404
    assert response.json() == {"code": 404, "message": "App not found."}


def test_invalid_credentials_are_rejected(client: TestClient, credentials) -> None:
    response = client.get(
        "/v1/users", headers={"X-Access-Key": "root", "X-API-Key": "not-the-secret"}
    )
    assert response.status_code == 401
    assert response.json() == {"code": 401, "message": "Invalid credentials"}


def test_create_assigns_system_fields(api: TestClient) -> None:
    created = _create_user(api, appid="someone-else", timestamp=1)
    assert created["type"] == "user"
    assert created["appid"] == "root"
    assert created["id"]
    assert created["timestamp"] > 1


def test_create_returns_location_header(api: TestClient) -> None:
    response = api.post("/v1/users", json={"email": "loc@example.org"})
    assert response.status_code == 201
    assert response.headers["location"].endswith(f"/v1/users/{response.json()['id']}")


def test_create_rejects_invalid_payloads(api: TestClient) -> None:
    response = api.post("/v1/users", json={"name": "no email"})
    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid object.")

    response = api.post("/v1/users", content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"code": 400, "message": "Invalid JSON object."}

    response = api.post("/v1/books", json=["not", "an", "object"])
    assert response.json() == {"code": 400, "message": "Invalid JSON object."}


def test_read_by_type_and_by_id(api: TestClient) -> None:
    created = _create_user(api)
    response = api.get(f"/v1/users/{created['id']}")
    assert response.status_code == 200
    assert response.json()["email"] == "ann@example.org"

    assert api.get(f"/v1/_id/{created['id']}").json()["id"] == created["id"]

    missing = api.get("/v1/users/does-not-exist")
    assert missing.status_code == 404
    assert missing.json() == {"code": 404, "message": "Object not found: does-not-exist"}


def test_update_merges_and_protects_system_fields(api: TestClient) -> None:
    created = _create_user(api, city="Sofia")
    response = api.put(
        f"/v1/users/{created['id']}",
        json={"name": "Ann Lee", "id": "hijack", "type": "tag", "appid": "other"},
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "Ann Lee"
    assert updated["city"] == "Sofia"
    assert updated["id"] == created["id"]
    assert updated["type"] == "user"
    assert updated["appid"] == "root"
    assert updated["updated"] is not None

    assert api.put("/v1/users/missing", json={"name": "x"}).status_code == 404
    invalid = api.put(f"/v1/users/{created['id']}", json={"email": "broken"})
    assert invalid.status_code == 400


def test_delete_twice(api: TestClient) -> None:
    created = _create_user(api)
    first = api.delete(f"/v1/users/{created['id']}")
    assert first.status_code == 200
    assert first.content == b""
    second = api.delete(f"/v1/users/{created['id']}")
    assert second.status_code == 404


def test_delete_requires_matching_type(api: TestClient) -> None:
    created = _create_user(api)
    assert api.delete(f"/v1/tags/{created['id']}").status_code == 404
    assert api.get(f"/v1/users/{created['id']}").status_code == 200


def test_custom_types_get_plural_aliases(api: TestClient) -> None:
    response = api.post("/v1/category", json={"name": "News"})
    assert response.status_code == 201
    assert response.json()["type"] == "category"

    types = api.get("/v1/_types").json()
    assert types["categories"] == "category"
    assert types["users"] == "user"

    listing = api.get("/v1/categories").json()
    assert [item["name"] for item in listing["items"]] == ["News"]


def test_unsupported_methods_report_unknown_type(api: TestClient) -> None:
    response = api.put("/v1/users", json={})
    assert response.status_code == 404
    assert response.json() == {"code": 404, "message": "Type 'user' not found."}
    assert api.post("/v1/users/123", json={}).status_code == 404


def test_listing_uses_pager_defaults(api: TestClient) -> None:
    for index in range(3):
        _create_user(api, email=f"user{index}@example.org")
    body = api.get("/v1/users").json()
    assert body["totalHits"] == 3
    assert body["page"] == 0
    assert len(body["items"]) == 3

    page = api.get("/v1/users", params={"limit": 2, "page": 2}).json()
    assert len(page["items"]) == 1
    assert page["totalHits"] == 3


def test_search_routes(api: TestClient) -> None:
    vip = _create_user(api, email="vip@example.org", tags=["vip", "active"])
    _create_user(api, email="plain@example.org", tags=["active"])

    tagged = api.get("/v1/users/search/tagged", params=[("tags", "vip"), ("tags", "active")]).json()
    assert [item["id"] for item in tagged["items"]] == [vip["id"]]

    count = api.get("/v1/users/search/count").json()
    assert count == {"items": [], "page": 0, "totalHits": 2}

    by_query = api.get("/v1/search/query", params={"type": "user", "q": "plain"}).json()
    assert by_query["totalHits"] == 1
    by_path = api.get("/v1/search/count", params={"type": "user"}).json()
    assert by_path["totalHits"] == 2


def test_search_type_parameter_accepts_aliases(api: TestClient) -> None:
    _create_user(api, email="alias@example.org")
    api.post("/v1/category", json={"name": "News"})

    assert api.get("/v1/search/count", params={"type": "users"}).json()["totalHits"] == 1
    by_alias = api.get("/v1/search/query", params={"type": "categories"}).json()
    assert [item["name"] for item in by_alias["items"]] == ["News"]
    assert api.get("/v1/search", params={"querytype": "count", "type": "users"}).json()["totalHits"] == 1
