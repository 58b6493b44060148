"""
Parsing of GraphQL ID values into movie primary keys
"""

import re

# Range of the INTEGER primary key column
MIN_MOVIE_ID = -(2**31)
MAX_MOVIE_ID = 2**31 - 1

_INTEGER_RE = re.compile(r"-?[0-9]+")


class InvalidMovieIdError(ValueError):
    """Raised when an ID value is not a valid movie primary key."""

    def __init__(self, value: object):
        super().__init__(f"Invalid movie id: {value!r}")
        self.value = value


def parse_movie_id(value: object) -> int:
    """Convert a GraphQL ID (string or int) to an integer primary key.

    Only an optional minus sign followed by ASCII digits is accepted, and the
    result must fit the 32-bit id column.
    """
    if isinstance(value, bool):
        raise InvalidMovieIdError(value)
    if isinstance(value, int):
        movie_id = value
    elif isinstance(value, str) and _INTEGER_RE.fullmatch(value):
        movie_id = int(value)
    else:
        raise InvalidMovieIdError(value)

    if not MIN_MOVIE_ID <= movie_id <= MAX_MOVIE_ID:
        raise InvalidMovieIdError(value)
    return movie_id
