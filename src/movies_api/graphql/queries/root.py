"""
Root GraphQL query definitions
"""

import strawberry

from ..types.movie import Movie, MovieFilter, MovieList


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def find_movies(
        self, info: strawberry.Info, filter: MovieFilter | None = None
    ) -> MovieList | None:
        """Get every movie matching the filter (all movies when omitted)."""
        from ..resolvers.movie import resolve_find_movies

        return await resolve_find_movies(info, filter)

    @strawberry.field
    async def get_movie(self, info: strawberry.Info, id: strawberry.ID) -> Movie | None:
        """Get a movie by ID."""
        from ..resolvers.movie import resolve_movie_by_id

        return await resolve_movie_by_id(info, id)
