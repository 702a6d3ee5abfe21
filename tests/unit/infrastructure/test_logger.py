# tests/unit/infrastructure/test_logger.py
from __future__ import annotations

import json
import logging

import pytest

from wishlist_api.infrastructure.logging.logger import (
    _JsonFormatter,  # internal but importable
    configure_root_logging,
    get_request_id,
    set_request_context,
)


def _render(msg: str, *, exc_info=None, **extra) -> dict:
    """Build a record with ``extra`` attributes and return the parsed JSON payload."""
    logger = logging.getLogger("test.logger")
    record = logger.makeRecord(
        name=logger.name,
        level=logging.INFO,
        fn="test_logger",
        lno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
        extra=extra or None,
    )
    return json.loads(_JsonFormatter().format(record))


def test_configure_root_logging_is_idempotent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root = logging.getLogger()
    saved = list(root.handlers)
    root.handlers.clear()
    try:
        configure_root_logging()
        configure_root_logging()

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, _JsonFormatter)
    finally:
        root.handlers[:] = saved


def test_stable_keys_and_extra_fields_are_top_level() -> None:
    payload = _render("wishlist_item_added", user_id="u1", product_id="p1")

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "wishlist_item_added"
    assert payload["user_id"] == "u1"
    assert payload["product_id"] == "p1"
    assert "ts" in payload


def test_non_json_values_are_stringified() -> None:
    payload = _render("x", details={"when": object}, items=("a", 1))

    assert payload["items"] == ["a", 1]
    assert isinstance(payload["details"]["when"], str)


def test_request_id_from_context() -> None:
    set_request_context(request_id="req-123")

    assert get_request_id() == "req-123"
    assert _render("hello")["request_id"] == "req-123"


def test_exception_info_is_summarized() -> None:
    try:
        raise ValueError("bad value")
    except ValueError:
        import sys

        payload = _render("failed", exc_info=sys.exc_info())

    assert payload["exc_type"] == "ValueError"
    assert payload["exc_message"] == "bad value"
