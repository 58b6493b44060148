"""
Tests for request logging middleware helpers
"""

import json

import pytest
from fastapi import Request

from movies_api.middleware import (
    extract_graphql_operation_name,
    operation_name_from_document,
    sanitize_query_params,
)


def make_request(method: str, path: str, body: bytes = b"", query_string: bytes = b"") -> Request:
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": query_string,
        "headers": [(b"content-type", b"application/json")],
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


def test_sanitize_query_params_redacts_sensitive_keys():
    params = {"title": "Heat", "api_key": "abc", "Authorization": "Bearer x"}

    assert sanitize_query_params(params) == {
        "title": "Heat",
        "api_key": "[REDACTED]",
        "Authorization": "[REDACTED]",
    }


def test_graphql_payload_params_are_redacted_on_graphql_path():
    params = {"query": "{ findMovies { items { id } } }", "variables": "{}", "operationName": "X"}

    assert sanitize_query_params(params, "/graphql") == {
        "query": "[REDACTED]",
        "variables": "[REDACTED]",
        "operationName": "X",
    }
    assert sanitize_query_params(params, "/health") == params


def test_non_credential_params_are_kept():
    params = {"session": "abc", "cookie_consent": "yes", "title": "Heat"}

    assert sanitize_query_params(params) == params


@pytest.mark.parametrize(
    ("document", "expected"),
    [
        ("query FindMovies { findMovies { items { id } } }", "FindMovies"),
        ("mutation LikeMovie($input: LikeMovieInput!) { likeMovie(input: $input) { movie { id } } }",
         "mutation:LikeMovie"),
        ("{ findMovies { items { id } } }", "unnamed_operation"),
        ("query IntrospectionQuery { __schema { types { name } } }", "__introspection"),
        ("", None),
        (None, None),
    ],
)
def test_operation_name_from_document(document, expected):
    assert operation_name_from_document(document) == expected


@pytest.mark.asyncio
async def test_post_operation_name_is_preferred():
    body = json.dumps({"operationName": "GetMovie", "query": "query Other { getMovie(id: 1) { id } }"})
    request = make_request("POST", "/graphql", body.encode())

    assert await extract_graphql_operation_name(request) == "GetMovie"


@pytest.mark.asyncio
async def test_post_falls_back_to_document():
    body = json.dumps({"query": "mutation DeleteMovie { deleteMovie(input: {id: 1}) { movie { id } } }"})
    request = make_request("POST", "/graphql", body.encode())

    assert await extract_graphql_operation_name(request) == "mutation:DeleteMovie"


@pytest.mark.asyncio
async def test_post_with_invalid_json_is_ignored():
    request = make_request("POST", "/graphql", b"{not json")

    assert await extract_graphql_operation_name(request) is None


@pytest.mark.asyncio
async def test_get_uses_query_string():
    request = make_request("GET", "/graphql", query_string=b"query=query%20FindMovies%20%7B%20x%20%7D")

    assert await extract_graphql_operation_name(request) == "FindMovies"


@pytest.mark.asyncio
async def test_other_paths_have_no_operation():
    request = make_request("POST", "/health", b'{"operationName": "X"}')

    assert await extract_graphql_operation_name(request) is None
