"""
Movie store: repository functions and the errors they raise
"""

from .errors import MovieNotFoundError, StoreError, UniqueConstraintError

__all__ = ["MovieNotFoundError", "StoreError", "UniqueConstraintError"]
