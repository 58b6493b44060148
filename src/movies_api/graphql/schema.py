"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import GraphQLError, get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema
from sqlalchemy.exc import SQLAlchemyError
from strawberry.extensions import MaskErrors
from strawberry.fastapi import GraphQLRouter

from ..config import settings
from ..logging import get_logger
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)

# Root fields clients depend on; startup fails if any goes missing
REQUIRED_FIELDS = {
    "Query": ("findMovies", "getMovie"),
    "Mutation": ("createMovie", "deleteMovie", "updateMovie", "likeMovie", "dislikeMovie"),
}

DATABASE_ERROR_MESSAGE = "Unexpected database error."


class SchemaValidationError(Exception):
    """Raised when the GraphQL schema is invalid at startup."""


def is_database_error(error: GraphQLError) -> bool:
    """Database failures carry SQL text and bound parameters in their message."""
    return isinstance(error.original_error, SQLAlchemyError)


def build_extensions(debug: bool) -> list[Any]:
    """Schema extensions; database error details are only shown in debug mode."""
    if debug:
        return []
    return [MaskErrors(should_mask_error=is_database_error, error_message=DATABASE_ERROR_MESSAGE)]


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=build_extensions(settings.debug),
)


def _problems(graphql_schema: Any) -> list[str]:
    problems = [str(e) for e in gql_validate_schema(graphql_schema)]
    if problems:
        return problems

    for type_name, fields in REQUIRED_FIELDS.items():
        root = graphql_schema.get_type(type_name)
        if root is None:
            problems.append(f"missing root type {type_name}")
            continue
        problems.extend(
            f"missing field {type_name}.{name}" for name in fields if name not in root.fields
        )

    introspection = graphql_sync(graphql_schema, get_introspection_query())
    problems.extend(f"introspection: {e}" for e in introspection.errors or ())
    return problems


def validate_schema() -> None:
    """Check the schema once at startup so the app fails before serving requests.

    Raises:
        SchemaValidationError: If graphql-core rejects the schema, a movie
            root field is missing, or introspection fails
    """
    problems = _problems(schema._schema)
    if problems:
        logger.error("GraphQL schema validation failed", problems=problems)
        raise SchemaValidationError("; ".join(problems))
    logger.info("GraphQL schema validation successful")


def create_graphql_router() -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI."""

    async def get_context(request: Request) -> dict[str, Any]:
        return {"request": request}

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql",
        context_getter=get_context,
    )
