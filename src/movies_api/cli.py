#!/usr/bin/env python3
"""
Command line for the Movies API: ``serve``, ``seed`` and the ``db`` group.
"""

import asyncio
import os
import sys

import click
import uvicorn

from movies_api import __version__
from movies_api.config import settings
from movies_api.database.cli import db
from movies_api.logging import configure_logging, get_logger

logger = get_logger(__name__)

APP_IMPORT_PATH = "movies_api.api.app:app"
LOG_LEVELS = ["debug", "info", "warning", "error"]


@click.group()
@click.version_option(version=__version__, prog_name="movies-api")
def cli() -> None:
    """Movies API CLI - run the server and manage the movie catalog."""


cli.add_command(db)


def uvicorn_target(reload: bool, workers: int) -> object:
    """Reload and multi-worker modes need an import string; otherwise pass the app itself."""
    if reload or workers > 1:
        return APP_IMPORT_PATH
    from movies_api.api.app import app

    return app


@cli.command()
@click.option("--host", default=None, help="Interface to bind (default: MOVIES_HOST or 0.0.0.0)")
@click.option("--port", default=None, type=int, help="TCP port (default: PORT or 4000)")
@click.option("--reload", is_flag=True, default=False, help="Restart on source changes")
@click.option("--workers", default=1, type=int, help="Worker processes (ignored with --reload)")
@click.option("--log-level", default="info", type=click.Choice(LOG_LEVELS))
def serve(host: str | None, port: int | None, reload: bool, workers: int, log_level: str) -> None:
    """Serve /graphql and /health with uvicorn."""
    host = host or settings.host
    port = port or settings.port
    if reload:
        workers = 1

    configure_logging(debug=log_level == "debug", log_level=log_level)
    # Reload and worker processes import the app afresh and read these
    os.environ["MOVIES_LOG_LEVEL"] = log_level
    if log_level == "debug":
        os.environ["MOVIES_DEBUG"] = "true"

    logger.info("Serving Movies API", host=host, port=port, reload=reload, workers=workers)
    try:
        uvicorn.run(
            uvicorn_target(reload, workers),
            host=host,
            port=port,
            reload=reload,
            workers=workers,
            log_level=log_level,
        )
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except Exception as e:
        logger.error("Server failed", host=host, port=port, error=str(e))
        sys.exit(1)


@cli.command()
@click.option("--database-url", default=None, help="Database to seed (default: MOVIES_DATABASE_URL)")
def seed(database_url: str | None) -> None:
    """Insert the sample catalog when the movies table is empty."""
    from movies_api.database.seed_data import seed_database

    configure_logging()
    try:
        inserted = asyncio.run(seed_database(database_url))
    except Exception as e:
        logger.error("Failed to seed database", error=str(e))
        click.echo(f"✗ Error seeding database: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Seeded {inserted} movies" if inserted else "✓ Movies already present")


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
