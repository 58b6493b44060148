"""
Movies API
GraphQL CRUD service for a movie catalog
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
