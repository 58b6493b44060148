"""
Movie GraphQL type definitions
"""

from typing import TYPE_CHECKING

import strawberry

if TYPE_CHECKING:
    from ...dbmodels import Movies


@strawberry.type
class Movie:
    """Movie type for GraphQL API."""

    id: strawberry.ID
    title: str
    description: str | None
    release_year: int | None
    duration: int | None = strawberry.field(description="Running time in minutes.")
    rating: float | None
    like_count: int
    dislike_count: int

    @classmethod
    def from_model(cls, movie: "Movies") -> "Movie":
        """Convert a Movies row to the GraphQL type."""
        return cls(
            id=strawberry.ID(str(movie.id)),
            title=movie.title,
            description=movie.description,
            release_year=movie.release_year,
            duration=movie.duration,
            rating=movie.rating,
            like_count=movie.like_count or 0,
            dislike_count=movie.dislike_count or 0,
        )


@strawberry.type
class MovieList:
    """Result of findMovies: every movie matching the filter."""

    items: list[Movie]


@strawberry.input
class StringFilter:
    """Predicates on a string column, combined with AND."""

    contains: str | None = None
    starts_with: str | None = None


@strawberry.input
class MovieFilter:
    """Filter for findMovies."""

    title: StringFilter | None = None
