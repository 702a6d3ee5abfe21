# tests/integration/routers/test_wishlist_router.py
from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from wishlist_api.dependencies.wishlist import get_wishlist_orchestrator
from wishlist_api.main import create_app


@pytest.fixture
def client(orchestrator, app_settings) -> Iterator[TestClient]:
    app = create_app(app_settings)
    app.dependency_overrides[get_wishlist_orchestrator] = lambda: orchestrator
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


def _add(client: TestClient, product_id: str = "p1", user_id: str = "u1"):
    return client.post(f"/v1/wishlists/{user_id}/items", json={"productId": product_id})


def test_get_unknown_wishlist_is_404_with_trace_id(client: TestClient) -> None:
    resp = client.get("/v1/wishlists/u1", headers={"X-Request-ID": "req-1"})

    assert resp.status_code == 404
    assert resp.headers["X-Request-ID"] == "req-1"
    assert resp.json() == {
        "error": {
            "code": "WISHLIST_NOT_FOUND",
            "http_status": 404,
            "message": "Your wishlist could not be found",
            "trace_id": "req-1",
        }
    }


def test_add_item_returns_201_with_camel_case_wishlist(client: TestClient) -> None:
    resp = _add(client)

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["userId"] == "u1"
    assert data["createdAt"].endswith("Z")
    assert data["items"] == [
        {
            "productId": "p1",
            "name": "Widget",
            "price": 9.99,
            "image": "",
            "category": "",
            "description": "",
            "variants": [],
            "totalStock": 0,
            "reviews": [],
        }
    ]

    got = client.get("/v1/wishlists/u1")
    assert got.status_code == 200
    assert got.json()["data"] == data


def test_duplicate_item_is_400(client: TestClient) -> None:
    _add(client)

    resp = _add(client)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "ITEM_ALREADY_EXISTS"
    assert resp.json()["error"]["message"] == "This item is already in your wishlist"


@pytest.mark.parametrize("body", [{}, {"productId": ""}, {"productId": "   "}])
def test_missing_product_id_is_400(client: TestClient, body) -> None:
    resp = client.post("/v1/wishlists/u1/items", json=body)

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Please provide a valid product ID"


@pytest.mark.parametrize("body", [{"productId": "p1", "quantity": 0}, {"productId": "p1", "x": 1}])
def test_malformed_body_is_422(client: TestClient, body) -> None:
    resp = client.post("/v1/wishlists/u1/items", json=body)

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_unknown_product_is_404(client: TestClient) -> None:
    resp = _add(client, "nope")

    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "The requested product could not be found"


def test_remove_and_clear(client: TestClient) -> None:
    _add(client, "p1")
    _add(client, "p2")

    removed = client.delete("/v1/wishlists/u1/items/p1")
    assert removed.status_code == 200
    assert [i["productId"] for i in removed.json()["data"]["items"]] == ["p2"]

    missing = client.delete("/v1/wishlists/u1/items/p1")
    assert missing.status_code == 404
    assert missing.json()["error"]["message"] == "The item was not found in your wishlist"

    cleared = client.delete("/v1/wishlists/u1/items")
    assert cleared.status_code == 200
    assert cleared.json()["data"]["items"] == []
    assert client.delete("/v1/wishlists/u1/items").status_code == 200


def test_add_to_cart_moves_item(client: TestClient, cart) -> None:
    _add(client)

    resp = client.post("/v1/wishlists/u1/cart", json={"productId": "p1", "quantity": 2})

    assert resp.status_code == 200
    assert resp.json()["data"] == {
        "success": True,
        "message": "Item added to cart successfully",
        "productId": "p1",
        "cartItems": [{"productId": "p1", "quantity": 2}],
    }
    assert client.get("/v1/wishlists/u1").json()["data"]["items"] == []


def test_rejected_cart_response_keeps_item(client: TestClient, cart) -> None:
    _add(client)
    cart.response = {}

    resp = client.post("/v1/wishlists/u1/cart", json={"productId": "p1"})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "CART_TRANSFER_FAILED"
    assert resp.json()["error"]["message"] == (
        "Cart service returned empty response - service may be unavailable"
    )
    items = client.get("/v1/wishlists/u1").json()["data"]["items"]
    assert [i["productId"] for i in items] == ["p1"]


def test_cart_transport_failure_is_400(client: TestClient, cart) -> None:
    _add(client)
    cart.error = ConnectionError("boom")

    resp = client.post("/v1/wishlists/u1/cart", json={"productId": "p1"})

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Unable to add item to cart: boom"


def test_unexpected_failure_is_generic_500(client: TestClient, store, monkeypatch) -> None:
    async def _explode(user_id: str):
        raise RuntimeError("secret connection string")

    monkeypatch.setattr(store, "find_by_user_id", _explode)

    resp = client.get("/v1/wishlists/u1")

    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "INTERNAL_ERROR"
    assert resp.json()["error"]["message"] == "An unexpected error occurred"
    assert "X-Request-ID" in resp.headers


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    resp = client.get("/v1/nothing-here")

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "HTTP_ERROR"


def test_health_and_metrics(client: TestClient) -> None:
    health = client.get("/healthz")
    assert health.status_code == 200
    assert health.json()["service"] == "wishlist-api"

    ready = client.get("/readyz")
    assert ready.status_code == 200
    assert ready.json()["status"] == "ok"

    _add(client)
    client.post("/v1/wishlists/u1/cart", json={"productId": "p1"})
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "wishlist_cart_transfers_total" in metrics.text
    assert "http_server_request_duration_seconds" in metrics.text
