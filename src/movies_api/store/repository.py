"""Repository helpers for the movies table.

Each function issues a single statement on the given session; inserts with
a client-supplied id also move the id sequence forward. Expected
failures are raised as store errors: MovieNotFoundError when no row matches
and UniqueConstraintError when an insert collides with an existing key.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Movies
from .errors import MovieNotFoundError, unique_violation_from

# Columns updateMovie may write
UPDATABLE_COLUMNS = frozenset(
    {
        "title",
        "description",
        "release_year",
        "duration",
        "rating",
        "like_count",
        "dislike_count",
    }
)

COUNTER_COLUMNS = frozenset({"like_count", "dislike_count"})

# setval() is not transactional; only ever move the sequence forward
ADVANCE_ID_SEQUENCE = text(
    "SELECT setval(pg_get_serial_sequence('movies', 'id'), :movie_id) "
    "FROM movies_id_seq WHERE NOT is_called OR last_value < :movie_id"
)


async def find_movies(
    session: AsyncSession,
    *,
    title_contains: str | None = None,
    title_starts_with: str | None = None,
) -> Sequence[Movies]:
    stmt = select(Movies).order_by(Movies.id)
    if title_contains is not None:
        stmt = stmt.where(Movies.title.contains(title_contains, autoescape=True))
    if title_starts_with is not None:
        stmt = stmt.where(Movies.title.startswith(title_starts_with, autoescape=True))
    res = await session.execute(stmt)
    return res.scalars().all()


async def get_movie(session: AsyncSession, movie_id: int) -> Movies | None:
    return await session.get(Movies, movie_id)


async def create_movie(
    session: AsyncSession,
    *,
    title: str,
    movie_id: int | None = None,
    description: str | None = None,
    release_year: int | None = None,
    duration: int | None = None,
    rating: float | None = None,
) -> Movies:
    movie = Movies(
        title=title,
        description=description,
        release_year=release_year,
        duration=duration,
        rating=rating,
    )
    if movie_id is not None:
        movie.id = movie_id

    session.add(movie)
    try:
        await session.flush()
    except IntegrityError as e:
        violation = unique_violation_from(e, Movies.__table__)
        if violation is not None:
            raise violation from e
        raise
    if movie_id is not None:
        await _advance_id_sequence(session, movie_id)
    # Load server defaults (counters)
    await session.refresh(movie)
    return movie


async def _advance_id_sequence(session: AsyncSession, movie_id: int) -> None:
    """Move the id sequence past a client-supplied id so generated ids skip it."""
    bind = session.bind
    if movie_id < 1 or bind is None or bind.dialect.name != "postgresql":
        return
    await session.execute(ADVANCE_ID_SEQUENCE, {"movie_id": movie_id})


async def update_movie(session: AsyncSession, movie_id: int, values: dict[str, Any]) -> Movies:
    """Write the given column values and return the updated row.

    Columns absent from ``values`` are left untouched; a ``None`` value writes NULL.
    """
    unknown = set(values) - UPDATABLE_COLUMNS
    if unknown:
        raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")

    if not values:
        # Nothing to write; still report a missing record
        movie = await get_movie(session, movie_id)
        if movie is None:
            raise MovieNotFoundError(movie_id)
        return movie

    stmt = (
        update(Movies)
        .where(Movies.id == movie_id)
        .values(**values)
        .returning(Movies)
        .execution_options(synchronize_session=False)
    )
    res = await session.execute(stmt)
    movie = res.scalar_one_or_none()
    if movie is None:
        raise MovieNotFoundError(movie_id)
    return movie


async def increment_counter(session: AsyncSession, movie_id: int, column: str) -> Movies:
    """Add one to a counter column in a single UPDATE statement."""
    if column not in COUNTER_COLUMNS:
        raise ValueError(f"Not a counter column: {column}")

    counter = getattr(Movies, column)
    stmt = (
        update(Movies)
        .where(Movies.id == movie_id)
        .values({counter: counter + 1})
        .returning(Movies)
        .execution_options(synchronize_session=False)
    )
    res = await session.execute(stmt)
    movie = res.scalar_one_or_none()
    if movie is None:
        raise MovieNotFoundError(movie_id)
    return movie


async def delete_movie(session: AsyncSession, movie_id: int) -> Movies:
    stmt = (
        delete(Movies)
        .where(Movies.id == movie_id)
        .returning(Movies)
        .execution_options(synchronize_session=False)
    )
    res = await session.execute(stmt)
    movie = res.scalar_one_or_none()
    if movie is None:
        raise MovieNotFoundError(movie_id)
    return movie
