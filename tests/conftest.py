"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import shutil
import subprocess
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from psycopg import Connection  # type: ignore[import]
from pytest_postgresql import factories  # type: ignore[import]

# Import types only for type checking, not at runtime
from pytest_postgresql.executors import PostgreSQLExecutor  # type: ignore[import]

from alembic import command
from alembic.config import Config

PROJECT_DIR = Path(__file__).parent.parent


def _pg_ctl_path() -> str | None:
    """Locate the pg_ctl that pytest-postgresql would start the server with.

    pg_config's bindir wins over PATH so client and server versions match;
    pg_config alone (client libraries only) does not count.
    """
    pg_config = shutil.which("pg_config")
    if pg_config:
        try:
            bindir = subprocess.run(
                [pg_config, "--bindir"], capture_output=True, text=True, check=True
            ).stdout.strip()
        except (OSError, subprocess.CalledProcessError):
            bindir = ""
        if bindir and (Path(bindir) / "pg_ctl").is_file():
            return str(Path(bindir) / "pg_ctl")
    return shutil.which("pg_ctl")


def _postgres_available() -> bool:
    return _pg_ctl_path() is not None


postgresql_proc = factories.postgresql_proc(executable=_pg_ctl_path())
postgresql = factories.postgresql("postgresql_proc")


def _dsn(postgresql: Connection[Any]) -> str:
    info = postgresql.info
    return (
        f"postgresql://{info.user}:{getattr(info, 'password', '') or ''}"
        f"@{info.host}:{info.port}/{info.dbname}"
    )


@pytest.fixture(scope="function")
def test_database(
    postgresql: Connection[Any],
) -> Generator[tuple[str, str], None, None]:
    """Return the DSN for the running pytest-postgresql database."""
    yield _dsn(postgresql), postgresql.info.dbname


@pytest.fixture(scope="function")
def alembic_migrate(
    postgresql_proc: PostgreSQLExecutor, test_database: tuple[str, str]
) -> Generator[None, None, None]:
    """Run Alembic upgrade to head against the pytest-postgresql instance."""
    dsn, _ = test_database

    os.environ["MOVIES_DATABASE_URL"] = dsn
    cfg = Config(str(PROJECT_DIR / "alembic.ini"))
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


@pytest_asyncio.fixture(scope="function")
async def movies_db(alembic_migrate: None, test_database: tuple[str, str]) -> Any:
    """Point the shared engine at the migrated test database for one test."""
    _ = alembic_migrate

    from movies_api.database.connection import close_database, init_database

    dsn, _ = test_database
    init_database(dsn, force_reinit=True)
    yield dsn
    await close_database()


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(  # type: ignore[reportUnknownMemberType]
        "markers", "requires_db: mark test as requiring database connection"
    )
    config.addinivalue_line("markers", "slow: mark test as slow running")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "integration: mark test as integration test")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "unit: mark test as unit test")  # type: ignore[reportUnknownMemberType]


def pytest_collection_modifyitems(config: Any, items: list[pytest.Item]) -> None:
    """Skip database tests when no PostgreSQL server binaries are installed."""
    if _postgres_available():
        return
    skip_db = pytest.mark.skip(reason="PostgreSQL binaries (pg_ctl) not available")
    for item in items:
        if "requires_db" in item.keywords:
            item.add_marker(skip_db)
