"""Tests for the non-atomic batch routes."""

from fastapi.testclient import TestClient

from Multitenant_API.observability.metrics import BATCH_ITEMS


def test_batch_create_reports_per_item_failures(api: TestClient) -> None:
    failures_before = BATCH_ITEMS.labels("create", "error")._value.get()
    response = api.post(
        "/v1/_batch",
        json=[
            {"type": "users", "email": "one@example.org"},
            {"type": "user", "name": "missing email"},
            {"name": "no type"},
            {"type": "book", "title": "Dune"},
        ],
    )
    assert response.status_code == 200
    first, second, third, fourth = response.json()
    assert first["type"] == "user" and first["id"]
    assert second["code"] == 400 and second["message"].startswith("Invalid object.")
    assert third == {"code": 400, "message": "Parameter 'type' is missing."}
    assert fourth["type"] == "book"
    assert BATCH_ITEMS.labels("create", "error")._value.get() == failures_before + 2

    assert api.get("/v1/users/search/count").json()["totalHits"] == 1


def test_batch_requires_array_and_enforces_limit(api: TestClient) -> None:
    response = api.post("/v1/_batch", json={"type": "user"})
    assert response.status_code == 400
    assert response.json() == {"code": 400, "message": "Batch request must be a JSON array."}

    too_many = [{"type": "book", "name": str(i)} for i in range(11)]
    response = api.post("/v1/_batch", json=too_many)
    assert response.status_code == 400
    assert response.json()["message"] == "Batch size exceeds the maximum of 10 items."

    ids = [("ids", str(i)) for i in range(11)]
    assert api.get("/v1/_batch", params=ids).status_code == 400
    assert api.delete("/v1/_batch", params=ids).status_code == 400


def test_batch_read_update_delete(api: TestClient) -> None:
    created = api.post(
        "/v1/_batch",
        json=[{"type": "book", "name": "Dune"}, {"type": "book", "name": "Emma"}],
    ).json()
    ids = [item["id"] for item in created]

    read = api.get("/v1/_batch", params=[("ids", ids[1]), ("ids", "missing"), ("ids", ids[0])])
    assert [item["id"] for item in read.json()] == [ids[1], ids[0]]

    updated = api.put(
        "/v1/_batch",
        json=[
            {"id": ids[0], "name": "Dune Messiah"},
            {"name": "no id"},
            {"id": "missing", "name": "x"},
        ],
    ).json()
    assert updated[0]["name"] == "Dune Messiah"
    assert updated[1] == {"code": 400, "message": "Parameter 'id' is missing."}
    assert updated[2] == {"code": 404, "message": "Object not found: missing"}

    deleted = api.delete("/v1/_batch", params=[("ids", ids[0]), ("ids", "missing")]).json()
    assert deleted[0] == {"id": ids[0], "deleted": True}
    assert deleted[1]["code"] == 404
    assert api.get(f"/v1/books/{ids[0]}").status_code == 404
    assert api.get(f"/v1/books/{ids[1]}").status_code == 200
