"""
Tests for sample catalog seeding
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from movies_api.database.seed_data import SAMPLE_MOVIES, seed_database, seed_sample_movies
from movies_api.dbmodels import Movies


def make_db(existing: int) -> MagicMock:
    db = MagicMock()
    count_result = MagicMock()
    count_result.scalar.return_value = existing
    db.execute = AsyncMock(return_value=count_result)
    db.flush = AsyncMock()
    return db


@pytest.mark.asyncio
async def test_seeds_empty_table():
    db = make_db(existing=0)

    inserted = await seed_sample_movies(db)

    assert inserted == len(SAMPLE_MOVIES)
    added = db.add_all.call_args.args[0]
    assert all(isinstance(movie, Movies) for movie in added)
    assert "War Games" in {movie.title for movie in added}
    db.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_skips_populated_table():
    db = make_db(existing=3)

    inserted = await seed_sample_movies(db)

    assert inserted == 0
    db.add_all.assert_not_called()
    db.flush.assert_not_awaited()


@pytest.mark.asyncio
async def test_custom_rows():
    db = make_db(existing=0)

    inserted = await seed_sample_movies(db, [{"title": "Heat", "release_year": 1995}])

    assert inserted == 1
    (movie,) = db.add_all.call_args.args[0]
    assert movie.title == "Heat"
    assert movie.release_year == 1995


@pytest.mark.asyncio
async def test_seed_database_owns_engine_lifecycle():
    db = make_db(existing=0)
    with (
        patch("movies_api.database.connection.init_database") as mock_init,
        patch("movies_api.database.connection.get_async_session") as mock_session,
        patch("movies_api.database.connection.close_database", new_callable=AsyncMock) as mock_close,
    ):
        mock_session.return_value.__aenter__.return_value = db
        inserted = await seed_database("postgresql://movies@db.invalid/movies")

    assert inserted == len(SAMPLE_MOVIES)
    mock_init.assert_called_once_with("postgresql://movies@db.invalid/movies", force_reinit=True)
    mock_close.assert_awaited_once()


@pytest.mark.asyncio
async def test_seed_database_closes_engine_on_failure():
    db = make_db(existing=0)
    db.flush.side_effect = RuntimeError("boom")
    with (
        patch("movies_api.database.connection.init_database"),
        patch("movies_api.database.connection.get_async_session") as mock_session,
        patch("movies_api.database.connection.close_database", new_callable=AsyncMock) as mock_close,
    ):
        mock_session.return_value.__aenter__.return_value = db
        with pytest.raises(RuntimeError):
            await seed_database()

    mock_close.assert_awaited_once()
