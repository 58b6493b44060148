"""
Tests for GraphQL ID parsing
"""

import pytest

from movies_api.graphql.ids import (
    MAX_MOVIE_ID,
    MIN_MOVIE_ID,
    InvalidMovieIdError,
    parse_movie_id,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("1", 1),
        ("0042", 42),
        ("-7", -7),
        (15, 15),
        (str(MAX_MOVIE_ID), MAX_MOVIE_ID),
        (str(MIN_MOVIE_ID), MIN_MOVIE_ID),
    ],
)
def test_valid_ids(value, expected):
    assert parse_movie_id(value) == expected


@pytest.mark.parametrize(
    "value",
    ["", "abc", "12abc", " 12", "1.5", "+3", "1e3", "١٢", True, None, 2.0],
)
def test_malformed_ids_are_rejected(value):
    with pytest.raises(InvalidMovieIdError):
        parse_movie_id(value)


def test_out_of_range_ids_are_rejected():
    with pytest.raises(InvalidMovieIdError):
        parse_movie_id(str(MAX_MOVIE_ID + 1))
    with pytest.raises(InvalidMovieIdError):
        parse_movie_id(MIN_MOVIE_ID - 1)


def test_error_carries_the_value():
    with pytest.raises(ValueError) as exc_info:
        parse_movie_id("abc")

    assert exc_info.value.value == "abc"
    assert str(exc_info.value) == "Invalid movie id: 'abc'"
