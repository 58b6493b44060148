from __future__ import annotations

import asyncio
import os
import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context  # type: ignore[reportMissingImports]

# Importable from a plain checkout as well as an installed package
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from movies_api.config import settings  # type: ignore  # noqa: E402
from movies_api.database.connection import to_async_url  # type: ignore  # noqa: E402
from movies_api.dbmodels import target_metadata  # type: ignore  # noqa: E402

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def database_url() -> str:
    """Target database: `movies-api db --database-url`, then the environment, then settings.

    The environment is read here rather than through ``settings`` because test
    fixtures point it at a throwaway database after settings were loaded.
    """
    return (
        config.attributes.get("database_url")
        or os.getenv("MOVIES_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or settings.database_url
    )


def configure_context(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


def run_migrations_offline() -> None:
    """Emit the migration SQL to the script output without connecting."""
    configure_context(
        url=database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_sync_migrations(connection: Connection) -> None:
    configure_context(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Apply migrations over asyncpg, the driver the application uses."""
    engine = create_async_engine(to_async_url(database_url()), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(run_sync_migrations)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
