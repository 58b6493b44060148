"""
Database commands, mounted on the main CLI as ``movies-api db``.

``upgrade`` brings the movies table to the latest revision and can seed the
sample catalog in the same run; ``status`` reports the applied revision next
to the number of stored movies.
"""

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path

import click
from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

from ..config import get_database_url
from ..dbmodels import Movies
from ..logging import get_logger
from .seed_data import seed_database

logger = get_logger(__name__)

PROJECT_DIR = Path(__file__).resolve().parents[3]


@dataclass
class SchemaStatus:
    current: str | None
    head: str | None
    movie_count: int | None

    @property
    def up_to_date(self) -> bool:
        return self.current is not None and self.current == self.head


def get_alembic_config(database_url: str | None = None) -> Config:
    """Alembic configuration for the project checkout, optionally aimed at another database."""
    alembic_ini = PROJECT_DIR / "alembic.ini"
    if not alembic_ini.exists():
        raise click.ClickException(f"alembic.ini not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(PROJECT_DIR / "alembic"))
    if database_url:
        # Read by alembic/env.py ahead of the environment
        config.attributes["database_url"] = database_url
    return config


def _read_status(connection: Connection, head: str | None) -> SchemaStatus:
    current = MigrationContext.configure(connection).get_current_revision()
    count = None
    if current is not None:
        count = connection.execute(select(func.count(Movies.id))).scalar_one()
    return SchemaStatus(current=current, head=head, movie_count=count)


async def read_status(database_url: str) -> SchemaStatus:
    """Applied revision, latest revision and stored movie count for a database."""
    from .connection import close_database, get_async_engine, init_database

    head = ScriptDirectory.from_config(get_alembic_config()).get_current_head()
    init_database(database_url, force_reinit=True)
    try:
        async with get_async_engine().connect() as conn:
            return await conn.run_sync(_read_status, head)
    finally:
        await close_database()


@click.group()
@click.option(
    "--database-url",
    default=None,
    help="Database to operate on (default: MOVIES_DATABASE_URL)",
)
@click.pass_context
def db(ctx: click.Context, database_url: str | None) -> None:
    """Manage the movies database schema and sample catalog."""
    ctx.obj = database_url or get_database_url()


@db.command()
@click.argument("revision", default="head")
@click.option(
    "--seed",
    is_flag=True,
    default=False,
    help="Insert the sample catalog when the movies table is empty",
)
@click.pass_obj
def upgrade(database_url: str, revision: str, seed: bool) -> None:
    """Upgrade the schema to a revision (default: head)."""
    try:
        logger.info("Upgrading database", revision=revision)
        command.upgrade(get_alembic_config(database_url), revision)
        inserted = asyncio.run(seed_database(database_url)) if seed else 0
    except Exception as e:
        logger.error("Database upgrade failed", revision=revision, error=str(e))
        click.echo(f"✗ Upgrade failed: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Schema at {revision}")
    if seed:
        click.echo(f"✓ Seeded {inserted} movies" if inserted else "✓ Movies already present")


@db.command()
@click.argument("revision", default="-1")
@click.confirmation_option(prompt="This drops movie data. Continue?")
@click.pass_obj
def downgrade(database_url: str, revision: str) -> None:
    """Downgrade the schema to a revision (default: one step back)."""
    try:
        logger.info("Downgrading database", revision=revision)
        command.downgrade(get_alembic_config(database_url), revision)
    except Exception as e:
        logger.error("Database downgrade failed", revision=revision, error=str(e))
        click.echo(f"✗ Downgrade failed: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Schema at {revision}")


@db.command()
@click.pass_obj
def status(database_url: str) -> None:
    """Show the applied revision and how many movies are stored."""
    try:
        state = asyncio.run(read_status(database_url))
    except Exception as e:
        logger.error("Failed to read database status", error=str(e))
        click.echo(f"✗ Cannot read database status: {e}", err=True)
        sys.exit(1)

    click.echo(f"revision: {state.current or 'none'} (head: {state.head or 'none'})")
    if state.movie_count is None:
        click.echo("movies: table not created, run `movies-api db upgrade`")
    else:
        click.echo(f"movies: {state.movie_count}")
    if not state.up_to_date:
        sys.exit(2)
