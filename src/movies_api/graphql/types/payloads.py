"""
Mutation payload type definitions
"""

from enum import Enum

import strawberry

from .movie import Movie
from .problems import CreateMovieProblems


@strawberry.enum
class Status(Enum):
    """Outcome of a mutation that can fail for a known reason."""

    # Member names are the GraphQL enum values
    Success = "success"
    Fail = "fail"


@strawberry.type
class CreateMoviePayload:
    """Result of createMovie: the new movie on success, problems on failure."""

    status: Status
    movie: Movie | None = None
    errors: list[CreateMovieProblems] | None = None


@strawberry.type
class DeleteMoviePayload:
    """The deleted movie, or null when no movie had the given id."""

    movie: Movie | None = None


@strawberry.type
class UpdateMoviePayload:
    """The updated movie, or null when no movie had the given id."""

    movie: Movie | None = None


@strawberry.type
class LikeMoviePayload:
    movie: Movie | None = None


@strawberry.type
class DislikeMoviePayload:
    movie: Movie | None = None
