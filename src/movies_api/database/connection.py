"""
Database connection management
"""

import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import inspect
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..config import get_database_url, settings
from ..dbmodels import Movies
from ..logging import get_logger

logger = get_logger(__name__)

# Process-wide connection pool, acquired by init_database() and released by close_database()
_async_engine: AsyncEngine | None = None
_async_session_local: async_sessionmaker[AsyncSession] | None = None
_init_lock = threading.Lock()


def to_async_url(database_url: str) -> str:
    """Rewrite a plain PostgreSQL URL so SQLAlchemy drives it through asyncpg."""
    for prefix in ("postgresql://", "postgres://"):
        if database_url.startswith(prefix):
            return "postgresql+asyncpg://" + database_url[len(prefix) :]
    return database_url


def init_database(database_url: str | None = None, force_reinit: bool = False) -> None:
    """Initialize the shared async engine and session factory.

    Thread-safe initialization using a lock to prevent race conditions
    when multiple threads attempt to initialize simultaneously.
    """
    global _async_engine, _async_session_local

    # Fast path: already initialized, no lock needed
    if _async_engine is not None and not force_reinit and database_url is None:
        return

    with _init_lock:
        # Double-check after acquiring lock (another thread may have initialized)
        if _async_engine is not None and not force_reinit and database_url is None:
            return

        db_url = to_async_url(database_url or get_database_url())

        engine_kwargs: dict = {"echo": settings.sql_echo}
        if db_url.startswith("postgresql"):
            engine_kwargs.update(
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
            )

        _async_engine = create_async_engine(db_url, **engine_kwargs)
        _async_session_local = async_sessionmaker(
            _async_engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

        logger.info("Database initialized", database_url=_async_engine.url.render_as_string())


async def close_database() -> None:
    """Dispose of the shared engine and release pooled connections."""
    global _async_engine, _async_session_local

    engine = _async_engine
    _async_engine = None
    _async_session_local = None

    if engine is not None:
        await engine.dispose()
        logger.info("Database connections closed")


def get_async_engine() -> AsyncEngine:
    """Get the shared async SQLAlchemy engine."""
    if _async_engine is None:
        init_database()
    assert _async_engine is not None
    return _async_engine


# Driver error fragments and the short hint /health reports for them
_CONNECTION_HINTS = (
    (("Connection refused", "could not connect"), "database server unreachable"),
    (("password authentication failed",), "database credentials rejected"),
    (("does not exist",), "database does not exist"),
)


def _has_movies_table(connection: Connection) -> bool:
    return inspect(connection).has_table(Movies.__tablename__)


async def check_database_connection() -> tuple[bool, str | None]:
    """Check that the store is reachable and the movies table is migrated.

    Returns:
        tuple: (ok, problem) where problem is a one-line description for /health
    """
    if _async_engine is None:
        return False, "Database engine not initialized"

    try:
        async with _async_engine.connect() as conn:
            migrated = await conn.run_sync(_has_movies_table)
    except Exception as e:
        message = str(e)
        hint = next(
            (hint for needles, hint in _CONNECTION_HINTS if any(n in message for n in needles)),
            type(e).__name__,
        )
        return False, f"{hint}: {message}"

    if not migrated:
        return False, "movies table missing, run `movies-api db upgrade`"
    return True, None


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session from the shared pool.

    Commits when the block exits normally and rolls back when it raises.
    """
    if _async_session_local is None:
        init_database()

    if _async_session_local is None:
        raise RuntimeError("Database not initialized")

    async with _async_session_local() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
