from __future__ import annotations

from typing import TYPE_CHECKING, Any

import strawberry

from ...database.connection import get_async_session
from ...logging import get_logger
from ...store import repository
from ...store.errors import MovieNotFoundError, UniqueConstraintError
from ..ids import InvalidMovieIdError, parse_movie_id
from ..types.movie import Movie, MovieList
from ..types.payloads import (
    CreateMoviePayload,
    DeleteMoviePayload,
    DislikeMoviePayload,
    LikeMoviePayload,
    Status,
    UpdateMoviePayload,
)
from ..types.problems import IdentifierAlreadyExistsProblem, InvalidIdentifierProblem

if TYPE_CHECKING:
    from ..mutations.root import (
        CreateMovieInput,
        DeleteMovieInput,
        DislikeMovieInput,
        LikeMovieInput,
        UpdateMovieInput,
    )
    from ..types.movie import MovieFilter

logger = get_logger(__name__)

# UpdateMovieInput fields, named like the movies columns they write
UPDATE_FIELDS = (
    "title",
    "description",
    "release_year",
    "duration",
    "rating",
    "like_count",
    "dislike_count",
)


# Query resolvers
async def resolve_find_movies(info: strawberry.Info, filter: MovieFilter | None) -> MovieList:
    """
    Resolve every movie matching the filter.

    Title predicates are optional and combined with AND.
    """
    title = filter.title if filter is not None else None
    contains = title.contains if title is not None else None
    starts_with = title.starts_with if title is not None else None

    async with get_async_session() as session:
        movies = await repository.find_movies(
            session, title_contains=contains, title_starts_with=starts_with
        )
        return MovieList(items=[Movie.from_model(movie) for movie in movies])


async def resolve_movie_by_id(info: strawberry.Info, id: strawberry.ID) -> Movie | None:
    """Resolve a movie by its ID, or None when it does not exist."""
    movie_id = parse_movie_id(id)

    async with get_async_session() as session:
        movie = await repository.get_movie(session, movie_id)
        if movie is None:
            logger.info("Movie not found", movie_id=movie_id)
            return None
        return Movie.from_model(movie)


# Mutation resolvers
async def create_movie(info: strawberry.Info, input: CreateMovieInput) -> CreateMoviePayload:
    """
    Create a new movie.

    A client-supplied id that is malformed or already taken is reported as a
    problem in the payload rather than raised.
    """
    movie_id: int | None = None
    if input.id is not None:
        try:
            movie_id = parse_movie_id(input.id)
        except InvalidMovieIdError as e:
            logger.info("Rejected movie id", movie_id=input.id)
            return CreateMoviePayload(
                status=Status.Fail,
                errors=[InvalidIdentifierProblem(message=str(e))],
            )

    try:
        async with get_async_session() as session:
            movie = await repository.create_movie(
                session,
                movie_id=movie_id,
                title=input.title,
                description=input.description,
                release_year=input.release_year,
                duration=input.duration,
                rating=input.rating,
            )
            result = Movie.from_model(movie)
    except UniqueConstraintError as e:
        if e.columns == ("id",):
            logger.info("Movie id already exists", movie_id=movie_id)
            return CreateMoviePayload(
                status=Status.Fail,
                errors=[IdentifierAlreadyExistsProblem()],
            )
        logger.error("Failed to create movie", error=str(e), columns=list(e.columns))
        raise
    except Exception as e:
        logger.error("Failed to create movie", error=str(e))
        raise

    logger.info("Movie created", movie_id=result.id, title=result.title)
    return CreateMoviePayload(status=Status.Success, movie=result)


async def delete_movie(info: strawberry.Info, input: DeleteMovieInput) -> DeleteMoviePayload:
    """Delete a movie; a missing movie yields a null payload."""
    movie_id = parse_movie_id(input.id)

    try:
        async with get_async_session() as session:
            movie = await repository.delete_movie(session, movie_id)
            result = Movie.from_model(movie)
    except MovieNotFoundError:
        logger.info("Movie to delete not found", movie_id=movie_id)
        return DeleteMoviePayload(movie=None)
    except Exception as e:
        logger.error("Failed to delete movie", movie_id=movie_id, error=str(e))
        raise

    logger.info("Movie deleted", movie_id=movie_id)
    return DeleteMoviePayload(movie=result)


def _update_values(input: UpdateMovieInput) -> dict[str, Any]:
    """Collect the fields present in the input; UNSET fields are skipped, None is kept."""
    return {
        field: getattr(input, field)
        for field in UPDATE_FIELDS
        if getattr(input, field) is not strawberry.UNSET
    }


async def update_movie(info: strawberry.Info, input: UpdateMovieInput) -> UpdateMoviePayload:
    """Update the provided fields of a movie; a missing movie yields a null payload."""
    movie_id = parse_movie_id(input.id)
    values = _update_values(input)

    try:
        async with get_async_session() as session:
            movie = await repository.update_movie(session, movie_id, values)
            result = Movie.from_model(movie)
    except MovieNotFoundError:
        logger.info("Movie to update not found", movie_id=movie_id)
        return UpdateMoviePayload(movie=None)
    except Exception as e:
        logger.error("Failed to update movie", movie_id=movie_id, error=str(e))
        raise

    logger.info("Movie updated", movie_id=movie_id, updated_fields=sorted(values))
    return UpdateMoviePayload(movie=result)


async def _increment(movie_id: int, column: str) -> Movie | None:
    try:
        async with get_async_session() as session:
            movie = await repository.increment_counter(session, movie_id, column)
            return Movie.from_model(movie)
    except MovieNotFoundError:
        logger.info("Movie to rate not found", movie_id=movie_id, counter=column)
        return None
    except Exception as e:
        logger.error("Failed to increment counter", movie_id=movie_id, counter=column, error=str(e))
        raise


async def like_movie(info: strawberry.Info, input: LikeMovieInput) -> LikeMoviePayload:
    """Add one like to a movie."""
    movie = await _increment(parse_movie_id(input.id), "like_count")
    return LikeMoviePayload(movie=movie)


async def dislike_movie(info: strawberry.Info, input: DislikeMovieInput) -> DislikeMoviePayload:
    """Add one dislike to a movie."""
    movie = await _increment(parse_movie_id(input.id), "dislike_count")
    return DislikeMoviePayload(movie=movie)
