"""
Exercise catalog for rack-session.

Resolves free-text exercise names to stable keys, display labels, and
movement/muscle tags.
"""

from .base import NOT_FOUND, CatalogEntry, Found, NotFound, normalize_name
from .registry import ExerciseCatalog, get_catalog

__all__ = [
    "CatalogEntry",
    "ExerciseCatalog",
    "Found",
    "NotFound",
    "NOT_FOUND",
    "get_catalog",
    "normalize_name",
]
