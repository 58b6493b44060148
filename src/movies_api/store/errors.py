"""
Store-level exceptions and driver error translation
"""

from __future__ import annotations

import re

from sqlalchemy import Table, UniqueConstraint
from sqlalchemy.exc import IntegrityError

UNIQUE_VIOLATION_SQLSTATE = "23505"

_KEY_DETAIL_RE = re.compile(r"Key \((?P<columns>[^)]+)\)=")
_SQLITE_UNIQUE_RE = re.compile(r"UNIQUE constraint failed: (?P<columns>[^\n]+)")


class StoreError(Exception):
    """Base class for expected store failures."""


class MovieNotFoundError(StoreError):
    """Raised when an operation targets a movie id that has no record."""

    def __init__(self, movie_id: int):
        super().__init__(f"No movie found with id {movie_id}")
        self.movie_id = movie_id


class UniqueConstraintError(StoreError):
    """Raised when a write violates a unique constraint."""

    def __init__(self, columns: tuple[str, ...], constraint: str | None = None):
        target = ", ".join(columns) if columns else "unknown columns"
        super().__init__(f"Unique constraint violated on {target}")
        self.columns = columns
        self.constraint = constraint


def _driver_errors(exc: IntegrityError) -> list[BaseException]:
    """The DBAPI error plus the native driver error it wraps, if any."""
    errors: list[BaseException] = []
    orig = exc.orig
    if orig is not None:
        errors.append(orig)
        if orig.__cause__ is not None:
            errors.append(orig.__cause__)
    return errors


def _sqlstate(errors: list[BaseException]) -> str | None:
    for error in errors:
        for attr in ("sqlstate", "pgcode"):
            value = getattr(error, attr, None)
            if isinstance(value, str):
                return value
    return None


def _constraint_name(errors: list[BaseException]) -> str | None:
    for error in errors:
        name = getattr(error, "constraint_name", None)
        if name:
            return name
        diag = getattr(error, "diag", None)
        if diag is not None and getattr(diag, "constraint_name", None):
            return diag.constraint_name
    return None


def _constraint_columns(table: Table, name: str) -> tuple[str, ...] | None:
    candidates = [table.primary_key] + [
        c for c in table.constraints if isinstance(c, UniqueConstraint)
    ]
    for constraint in candidates:
        if constraint.name == name:
            return tuple(column.name for column in constraint.columns)
    for index in table.indexes:
        if index.unique and index.name == name:
            return tuple(column.name for column in index.columns)
    return None


def unique_violation_from(exc: IntegrityError, table: Table) -> UniqueConstraintError | None:
    """Translate an IntegrityError into a UniqueConstraintError.

    Returns None when the error is some other integrity failure (NOT NULL,
    CHECK, foreign key, ...).
    """
    errors = _driver_errors(exc)
    message = "\n".join(str(error) for error in errors) or str(exc)

    sqlite_match = _SQLITE_UNIQUE_RE.search(message)
    if sqlite_match:
        columns = tuple(
            part.strip().split(".")[-1] for part in sqlite_match.group("columns").split(",")
        )
        return UniqueConstraintError(columns)

    if _sqlstate(errors) != UNIQUE_VIOLATION_SQLSTATE:
        return None

    constraint = _constraint_name(errors)
    columns = _constraint_columns(table, constraint) if constraint else None
    if columns is None:
        detail_match = _KEY_DETAIL_RE.search(message)
        if detail_match:
            columns = tuple(
                part.strip().strip('"') for part in detail_match.group("columns").split(",")
            )
    return UniqueConstraintError(columns or (), constraint)
