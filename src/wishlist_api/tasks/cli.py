# src/wishlist_api/tasks/cli.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Wishlist CLI: operational commands.

Commands:
    serve      Run the HTTP API under uvicorn.
    init-db    Create the ``wishlists`` table on the configured database.

Environment:
    DATABASE_URL    Async SQLAlchemy URL (required by ``init-db``).
    PORT            Listen port for ``serve`` (default 3002).
"""

from __future__ import annotations

import asyncio

import typer
import uvicorn

from wishlist_api.config.settings import get_settings
from wishlist_api.infrastructure.database import session as db_session
from wishlist_api.infrastructure.logging.logger import configure_root_logging, get_json_logger

configure_root_logging()
log = get_json_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address."),  # noqa: B008
    port: int | None = typer.Option(None, help="Listen port; defaults to PORT."),  # noqa: B008
    reload: bool = typer.Option(False, help="Enable auto-reload (development only)."),  # noqa: B008
) -> None:
    """Run the wishlist API."""
    settings = get_settings()
    resolved_port = port or settings.port
    log.info("serve_start", extra={"host": host, "port": resolved_port})
    uvicorn.run(
        "wishlist_api.main:app",
        host=host,
        port=resolved_port,
        reload=reload,
        log_config=None,
    )


@app.command("init-db")
def init_db(
    database_url: str | None = typer.Option(
        None, help="Async SQLAlchemy URL; defaults to DATABASE_URL."
    ),  # noqa: B008
) -> None:
    """Create the wishlist tables if they do not exist."""
    settings = get_settings()
    if database_url:
        settings = settings.model_copy(update={"database_url": database_url})
    if not settings.database_url:
        typer.echo("DATABASE_URL is not configured", err=True)
        raise typer.Exit(code=2)

    async def _run() -> None:
        db_session.init_engine_and_sessionmaker(settings)
        try:
            await db_session.create_all()
        finally:
            await db_session.dispose_engine()

    asyncio.run(_run())
    log.info("init_db_done")
    typer.echo("Tables created")


if __name__ == "__main__":  # pragma: no cover
    app()
