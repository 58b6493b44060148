"""
Main FastAPI application for the Movies API
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..database.connection import check_database_connection, close_database, init_database
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

# Module-level loggers bind at import time
configure_logging(debug=settings.debug, log_level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the engine on startup and dispose of it on shutdown."""
    logger.info("Starting Movies API...", port=settings.port)
    init_database()

    ok, error = await check_database_connection()
    if ok:
        logger.info("Database connection verified")
    else:
        # Requests that need the store will fail until it becomes reachable
        logger.warning("Database connection check failed", error=error)

    try:
        yield
    finally:
        logger.info("Shutting down Movies API...")
        await close_database()


def create_app() -> FastAPI:
    """FastAPI app serving /graphql and /health."""

    app = FastAPI(
        title="Movies API",
        description="GraphQL API for a movie catalog",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        ok, error = await check_database_connection()
        return {
            "status": "healthy" if ok else "degraded",
            "version": __version__,
            "database": "ok" if ok else error,
        }

    if os.getenv("MOVIES_DISABLE_GRAPHQL"):
        logger.info("GraphQL endpoint disabled", env="MOVIES_DISABLE_GRAPHQL")
    else:
        mount_graphql(app)

    return app


def mount_graphql(app: FastAPI) -> None:
    """Validate the schema and serve it at /graphql; a broken schema aborts startup."""
    from ..graphql.schema import create_graphql_router, validate_schema

    validate_schema()
    app.include_router(create_graphql_router())
    logger.info("GraphQL endpoint mounted", endpoint="/graphql", debug=settings.debug)


app = create_app()

if __name__ == "__main__":
    from ..cli import cli

    cli(["serve"])
