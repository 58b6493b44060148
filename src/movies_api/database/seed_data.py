"""
Reusable seed data functions for database initialization.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Movies
from ..logging import get_logger

logger = get_logger(__name__)

SAMPLE_MOVIES: list[dict[str, Any]] = [
    {
        "title": "Star Wars: A New Hope",
        "description": "A farm boy joins a rebellion against a galactic empire.",
        "release_year": 1977,
        "duration": 121,
        "rating": 8.6,
    },
    {
        "title": "War Games",
        "description": "A young hacker accidentally accesses a military supercomputer.",
        "release_year": 1983,
        "duration": 114,
        "rating": 7.1,
    },
    {
        "title": "The Grand Budapest Hotel",
        "description": "A concierge and his lobby boy are caught up in a theft and a murder.",
        "release_year": 2014,
        "duration": 99,
        "rating": 8.1,
    },
    {
        "title": "Spirited Away",
        "description": None,
        "release_year": 2001,
        "duration": 125,
        "rating": 8.6,
    },
]


async def seed_sample_movies(
    db: AsyncSession, movies: list[dict[str, Any]] | None = None
) -> int:
    """
    Insert sample movies when the movies table is empty.

    Args:
        db: Database session
        movies: Rows to insert (defaults to SAMPLE_MOVIES)

    Returns:
        Number of movies inserted (0 when the table already had rows)
    """
    existing = (await db.execute(select(func.count(Movies.id)))).scalar() or 0
    if existing:
        logger.info("Movies table already populated, skipping seed", existing=existing)
        return 0

    rows = movies if movies is not None else SAMPLE_MOVIES
    db.add_all([Movies(**row) for row in rows])
    await db.flush()

    logger.info("Seeded sample movies", count=len(rows))
    return len(rows)


async def seed_database(database_url: str | None = None) -> int:
    """
    Seed the sample catalog in its own engine lifecycle.

    Used by the command line, where no application lifespan owns the engine.

    Args:
        database_url: Database to seed (defaults to the configured one)

    Returns:
        Number of movies inserted
    """
    from .connection import close_database, get_async_session, init_database

    init_database(database_url, force_reinit=database_url is not None)
    try:
        async with get_async_session() as db:
            return await seed_sample_movies(db)
    finally:
        await close_database()
