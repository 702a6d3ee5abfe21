# tests/unit/infrastructure/middleware/test_request_id.py
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from wishlist_api.infrastructure.logging.logger import get_request_id
from wishlist_api.infrastructure.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIdMiddleware,
    coerce_request_id,
)


def _app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIdMiddleware)

    @app.get("/echo")
    async def echo(request: Request) -> dict[str, str | None]:
        return {"state": request.state.request_id, "ctx": get_request_id()}

    return app


def test_caller_request_id_is_propagated() -> None:
    client = TestClient(_app())

    resp = client.get("/echo", headers={REQUEST_ID_HEADER: "abc-123"})

    assert resp.headers[REQUEST_ID_HEADER] == "abc-123"
    assert resp.json() == {"state": "abc-123", "ctx": "abc-123"}


def test_unsafe_request_id_is_replaced() -> None:
    client = TestClient(_app())

    resp = client.get("/echo", headers={REQUEST_ID_HEADER: "bad id with spaces"})

    generated = resp.headers[REQUEST_ID_HEADER]
    assert generated != "bad id with spaces"
    assert resp.json()["state"] == generated


def test_coerce_request_id() -> None:
    assert coerce_request_id("req-1") == "req-1"
    assert len(coerce_request_id(None)) == 36
    assert coerce_request_id("x" * 200) != "x" * 200
