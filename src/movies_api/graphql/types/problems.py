"""
Problem types: expected, client-actionable mutation failures returned as data
"""

from enum import Enum
from typing import Annotated

import strawberry

IDENTIFIER_ALREADY_EXISTS_MESSAGE = "Identifier already exists."


@strawberry.enum
class ProblemCode(Enum):
    """Tag naming the concrete problem variant."""

    IDENTIFIER_ALREADY_EXISTS = "identifier_already_exists"
    INVALID_IDENTIFIER = "invalid_identifier"


@strawberry.interface
class Problem:
    """Common shape of every problem variant."""

    message: str
    code: ProblemCode


@strawberry.type
class IdentifierAlreadyExistsProblem(Problem):
    """The client-supplied id is already taken by another movie."""

    message: str = IDENTIFIER_ALREADY_EXISTS_MESSAGE
    code: ProblemCode = ProblemCode.IDENTIFIER_ALREADY_EXISTS


@strawberry.type
class InvalidIdentifierProblem(Problem):
    """The client-supplied id is not an integer in the allowed range."""

    message: str
    code: ProblemCode = ProblemCode.INVALID_IDENTIFIER


# Members are told apart by their Python class, never by their field set
CreateMovieProblems = Annotated[
    IdentifierAlreadyExistsProblem | InvalidIdentifierProblem,
    strawberry.union("CreateMovieProblems"),
]
