"""
Database module for the Movies API
"""

from .connection import close_database, get_async_session, init_database

__all__ = ["close_database", "get_async_session", "init_database"]
