# tests/unit/tasks/test_cli.py
from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest
from typer.testing import CliRunner

from wishlist_api.tasks.cli import app

runner = CliRunner()


def test_init_db_creates_wishlists_table(tmp_path: Path) -> None:
    db_file = tmp_path / "wishlists.db"

    result = runner.invoke(app, ["init-db", "--database-url", f"sqlite+aiosqlite:///{db_file}"])

    assert result.exit_code == 0, result.output
    with sqlite3.connect(db_file) as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master")}
    assert "wishlists" in tables


def test_init_db_requires_database_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)

    result = runner.invoke(app, ["init-db"])

    assert result.exit_code == 2


def test_serve_uses_configured_port(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: dict[str, object] = {}
    monkeypatch.setenv("PORT", "4010")
    monkeypatch.setattr("uvicorn.run", lambda target, **kw: calls.update(target=target, **kw))

    result = runner.invoke(app, ["serve"])

    assert result.exit_code == 0, result.output
    assert calls["target"] == "wishlist_api.main:app"
    assert calls["port"] == 4010
