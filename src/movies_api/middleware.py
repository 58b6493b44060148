"""
Middleware for request context and logging
"""

import json
import re
import time
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import clear_request_context, get_logger, set_request_context

logger = get_logger(__name__)

GRAPHQL_PATH = "/graphql"

# Substrings of query-parameter names whose values never reach the logs
SENSITIVE_KEYS = ("password", "secret", "token", "key", "auth")

# A GraphQL GET carries the whole document and its variables in the query string
GRAPHQL_PAYLOAD_PARAMS = ("query", "variables", "extensions")

REDACTED = "[REDACTED]"

_OPERATION_RE = re.compile(r"\b(query|mutation)\s+(\w+)")


def sanitize_query_params(params: dict[str, Any], path: str | None = None) -> dict[str, Any]:
    """Copy of ``params`` safe to log: credentials and GraphQL payloads are redacted."""
    hidden = GRAPHQL_PAYLOAD_PARAMS if path == GRAPHQL_PATH else ()
    return {
        key: REDACTED
        if key in hidden or any(word in key.lower() for word in SENSITIVE_KEYS)
        else value
        for key, value in params.items()
    }


def operation_name_from_document(query: Any) -> str | None:
    """Derive an operation label from a GraphQL document string."""
    if not isinstance(query, str) or not query:
        return None
    if "__schema" in query or "IntrospectionQuery" in query:
        return "__introspection"
    match = _OPERATION_RE.search(query)
    if match:
        kind = "mutation:" if match.group(1) == "mutation" else ""
        return f"{kind}{match.group(2)}"
    return "unnamed_operation"


async def extract_graphql_operation_name(request: Request) -> str | None:
    """Best-effort GraphQL operation name for GET and POST /graphql requests."""
    if request.url.path != GRAPHQL_PATH:
        return None

    if request.method == "GET":
        params = dict(request.query_params)
        op = params.get("operationName")
        if isinstance(op, str) and op:
            return op
        return operation_name_from_document(params.get("query"))

    if request.method == "POST":
        try:
            body = await request.body()
            if not body:
                return None
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        if not isinstance(data, dict):
            return None
        op = data.get("operationName")
        if isinstance(op, str) and op:
            return op
        return operation_name_from_document(data.get("query"))

    return None


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Tag every log line of a request with its id and GraphQL operation."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        set_request_context(operation=await extract_graphql_operation_name(request))
        started = time.perf_counter()

        try:
            logger.info(
                "Request started",
                method=request.method,
                path=path,
                query_params=sanitize_query_params(dict(request.query_params), path) or None,
                user_agent=request.headers.get("user-agent"),
                remote_addr=request.client.host if request.client else None,
            )
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response
        except Exception as e:
            logger.error("Request failed", method=request.method, path=path, error=str(e))
            raise
        finally:
            clear_request_context()
