"""
Integration tests for the trek endpoints
"""
import pytest

from trekhub.core.dependencies import get_trek_service
from trekhub.core.exceptions import StoreUnavailableError
from trekhub.main import app


@pytest.fixture
def created(client, auth_headers, trek_payload):
    r = client.post("/treks", json=trek_payload, headers=auth_headers)
    assert r.status_code == 201, r.text
    return r.json()


@pytest.mark.parametrize("method,path", [
    ("GET", "/treks"),
    ("POST", "/treks"),
    ("GET", "/treks/1"),
    ("PUT", "/treks/1"),
    ("DELETE", "/treks/1"),
])
def test_every_trek_route_needs_a_token(client, method, path):
    r = client.request(method, path)
    assert r.status_code == 401
    assert r.json()["msg"] == "No token, authorization denied"


def test_create_trek(created, test_user, trek_payload):
    assert created["owner_id"] == test_user.id
    for key, value in trek_payload.items():
        assert created[key] == value
    assert "created_at" in created


def test_create_ignores_client_owner(client, auth_headers, other_user, test_user, trek_payload):
    r = client.post("/treks", json={**trek_payload, "owner_id": other_user.id}, headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["owner_id"] == test_user.id


def test_create_reports_every_invalid_field(client, auth_headers, trek_payload):
    r = client.post("/treks", json={**trek_payload, "difficulty": "Extreme", "price": -5}, headers=auth_headers)
    assert r.status_code == 400
    assert sorted(f["field"] for f in r.json()["details"]["fields"]) == ["difficulty", "price"]


def test_create_requires_fields(client, auth_headers):
    r = client.post("/treks", json={}, headers=auth_headers)
    assert r.status_code == 400
    assert sorted(f["field"] for f in r.json()["details"]["fields"]) == [
        "difficulty", "location", "name", "price"
    ]


def test_any_user_can_read(client, created, other_headers):
    r = client.get(f"/treks/{created['id']}", headers=other_headers)
    assert r.status_code == 200
    assert r.json() == created


def test_read_missing_and_malformed_ids(client, auth_headers):
    assert client.get("/treks/999", headers=auth_headers).status_code == 404
    assert client.get("/treks/abc", headers=auth_headers).status_code == 400


def test_listing_pages(client, auth_headers, trek_payload):
    for i in range(15):
        client.post("/treks", json={**trek_payload, "name": f"Trek {i}"}, headers=auth_headers)

    first = client.get("/treks", headers=auth_headers).json()
    assert first["total"] == 15
    assert first["page"] == 1
    assert first["limit"] == 10
    assert len(first["treks"]) == 10

    second = client.get("/treks", params={"page": 2}, headers=auth_headers).json()
    assert [t["name"] for t in second["treks"]] == [f"Trek {i}" for i in range(10, 15)]

    beyond = client.get("/treks", params={"page": 9}, headers=auth_headers).json()
    assert beyond["treks"] == []
    assert beyond["total"] == 15


@pytest.mark.parametrize("raw", ["0", "-3", "abc", ""])
def test_invalid_page_falls_back_to_first(client, auth_headers, created, raw):
    body = client.get("/treks", params={"page": raw}, headers=auth_headers).json()
    assert body["page"] == 1
    assert body["treks"][0]["id"] == created["id"]


def test_limit_is_capped(client, auth_headers, created):
    body = client.get("/treks", params={"limit": 5000}, headers=auth_headers).json()
    assert body["limit"] == 100


def test_listing_shows_other_users_treks(client, created, other_headers):
    body = client.get("/treks", headers=other_headers).json()
    assert [t["id"] for t in body["treks"]] == [created["id"]]


def test_owner_updates(client, auth_headers, created):
    r = client.put(f"/treks/{created['id']}", json={"price": 1200, "images": []}, headers=auth_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["price"] == 1200
    assert body["images"] == []
    assert body["name"] == created["name"]


def test_update_with_invalid_merge(client, auth_headers, created):
    r = client.put(f"/treks/{created['id']}", json={"name": None}, headers=auth_headers)
    assert r.status_code == 400
    assert [f["field"] for f in r.json()["details"]["fields"]] == ["name"]


def test_non_owner_cannot_modify(client, other_headers, auth_headers, created):
    put = client.put(f"/treks/{created['id']}", json={"name": "Mine now"}, headers=other_headers)
    delete = client.delete(f"/treks/{created['id']}", headers=other_headers)
    assert put.status_code == delete.status_code == 403
    assert put.json()["msg"] == "Not authorized"

    unchanged = client.get(f"/treks/{created['id']}", headers=auth_headers).json()
    assert unchanged == created


def test_missing_trek_wins_over_ownership(client, other_headers):
    assert client.put("/treks/4242", json={"name": "x"}, headers=other_headers).status_code == 404
    assert client.delete("/treks/4242", headers=other_headers).status_code == 404


def test_delete_then_delete_again(client, auth_headers, created):
    first = client.delete(f"/treks/{created['id']}", headers=auth_headers)
    assert first.status_code == 200
    assert first.json() == {"msg": "Trek removed"}

    assert client.delete(f"/treks/{created['id']}", headers=auth_headers).status_code == 404
    assert client.get(f"/treks/{created['id']}", headers=auth_headers).status_code == 404


def test_store_outage_returns_503(client, auth_headers):
    class DownService:
        def get_trek(self, trek_id):
            raise StoreUnavailableError()

    app.dependency_overrides[get_trek_service] = lambda: DownService()
    r = client.get("/treks/1", headers=auth_headers)
    assert r.status_code == 503
    assert r.json()["error_code"] == "STORE_UNAVAILABLE"


def test_request_id_is_echoed(client, auth_headers):
    r = client.get("/treks", headers={**auth_headers, "X-Request-ID": "trace-123"})
    assert r.headers["X-Request-ID"] == "trace-123"


def test_cors_preflight_skips_auth(client):
    r = client.options(
        "/treks",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )
    assert r.status_code == 200


def test_invalid_update_on_missing_trek_is_not_found(client, other_headers):
    r = client.put("/treks/4242", json={"difficulty": "Extreme"}, headers=other_headers)
    assert r.status_code == 404


def test_invalid_update_from_non_owner_is_forbidden(client, other_headers, created):
    r = client.put(f"/treks/{created['id']}", json={"price": -1}, headers=other_headers)
    assert r.status_code == 403


def test_invalid_update_from_owner_lists_fields(client, auth_headers, created):
    r = client.put(
        f"/treks/{created['id']}",
        json={"difficulty": "Extreme", "price": -1},
        headers=auth_headers,
    )
    assert r.status_code == 400
    assert sorted(f["field"] for f in r.json()["details"]["fields"]) == ["difficulty", "price"]


def test_update_cannot_change_owner(client, auth_headers, created, other_user, test_user):
    r = client.put(f"/treks/{created['id']}", json={"owner_id": other_user.id, "price": 10}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["owner_id"] == test_user.id
    assert r.json()["price"] == 10
