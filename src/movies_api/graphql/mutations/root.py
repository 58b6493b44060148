"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.payloads import (
    CreateMoviePayload,
    DeleteMoviePayload,
    DislikeMoviePayload,
    LikeMoviePayload,
    UpdateMoviePayload,
)


# Input types for mutations
@strawberry.input
class CreateMovieInput:
    """Input for creating a new movie. The id is assigned by the store when omitted."""

    title: str
    id: strawberry.ID | None = None
    description: str | None = None
    release_year: int | None = None
    duration: int | None = None
    rating: float | None = None


@strawberry.input
class UpdateMovieInput:
    """Input for updating a movie.

    Omitted fields are left unchanged; fields given as null are cleared.
    """

    id: strawberry.ID
    title: str | None = strawberry.UNSET
    description: str | None = strawberry.UNSET
    release_year: int | None = strawberry.UNSET
    duration: int | None = strawberry.UNSET
    rating: float | None = strawberry.UNSET
    like_count: int | None = strawberry.UNSET
    dislike_count: int | None = strawberry.UNSET


@strawberry.input
class DeleteMovieInput:
    id: strawberry.ID


@strawberry.input
class LikeMovieInput:
    id: strawberry.ID


@strawberry.input
class DislikeMovieInput:
    id: strawberry.ID


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    @strawberry.mutation(name="createMovie")
    async def create_movie(
        self, info: strawberry.Info, input: CreateMovieInput
    ) -> CreateMoviePayload | None:
        """Create a new movie."""
        from ..resolvers.movie import create_movie

        return await create_movie(info, input)

    @strawberry.mutation(name="deleteMovie")
    async def delete_movie(
        self, info: strawberry.Info, input: DeleteMovieInput
    ) -> DeleteMoviePayload | None:
        """Delete a movie."""
        from ..resolvers.movie import delete_movie

        return await delete_movie(info, input)

    @strawberry.mutation(name="updateMovie")
    async def update_movie(
        self, info: strawberry.Info, input: UpdateMovieInput
    ) -> UpdateMoviePayload | None:
        """Update an existing movie."""
        from ..resolvers.movie import update_movie

        return await update_movie(info, input)

    @strawberry.mutation(name="likeMovie")
    async def like_movie(
        self, info: strawberry.Info, input: LikeMovieInput
    ) -> LikeMoviePayload | None:
        """Increment a movie's like count."""
        from ..resolvers.movie import like_movie

        return await like_movie(info, input)

    @strawberry.mutation(name="dislikeMovie")
    async def dislike_movie(
        self, info: strawberry.Info, input: DislikeMovieInput
    ) -> DislikeMoviePayload | None:
        """Increment a movie's dislike count."""
        from ..resolvers.movie import dislike_movie

        return await dislike_movie(info, input)
