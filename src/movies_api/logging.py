"""
Structured logging for the Movies API.

Every module logs through ``get_logger(__name__)``. Records carry the request
id and GraphQL operation of the request being served, set by
``LoggingContextMiddleware``.
"""

import base64
import logging
import secrets
import sys
import time
from contextvars import ContextVar
from typing import Any

import structlog

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
operation_ctx: ContextVar[str | None] = ContextVar("graphql_operation", default=None)


class RequestContextFilter:
    """structlog processor adding the current request id and GraphQL operation."""

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        _ = logger, method_name

        request_id = request_id_ctx.get()
        if request_id:
            event_dict["request_id"] = request_id

        operation = operation_ctx.get()
        if operation:
            # An explicit graphql_operation on the call wins
            event_dict.setdefault("graphql_operation", operation)

        return event_dict


def resolve_level(debug: bool, log_level: str | None) -> int:
    """Numeric level for a level name; unknown names fall back to INFO."""
    if not log_level:
        return logging.DEBUG if debug else logging.INFO
    level = logging.getLevelName(log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(debug: bool = False, log_level: str | None = None) -> None:
    """Route stdlib logging and structlog to stdout.

    Debug mode renders colored console lines; otherwise one JSON object per
    line is written.

    Args:
        debug: Console rendering, and DEBUG level unless ``log_level`` is given
        log_level: Level name such as "warning"
    """
    logging.basicConfig(
        level=resolve_level(debug, log_level),
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    renderer: Any = (
        structlog.dev.ConsoleRenderer(colors=True) if debug else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            RequestContextFilter(),
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Compact request id: 8-byte microsecond timestamp plus 2 random bytes.

    Encoded as 14 URL-safe base64 characters, e.g. 'AAYPmHq3dT4k9w'.
    """
    raw = int(time.time() * 1_000_000).to_bytes(8, byteorder="big") + secrets.token_bytes(2)
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def set_request_context(request_id: str | None = None, operation: str | None = None) -> None:
    """Start a request's logging context, generating a request id when none is given."""
    request_id_ctx.set(request_id or generate_request_id())
    if operation is not None:
        operation_ctx.set(operation)


def clear_request_context() -> None:
    request_id_ctx.set(None)
    operation_ctx.set(None)


def get_request_id() -> str | None:
    return request_id_ctx.get()
