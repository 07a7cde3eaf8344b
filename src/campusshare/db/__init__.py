"""Database module for the local SQLite store files."""

from .models import Base, StoreMeta
from .sqlite import Database

__all__ = [
    "Base",
    "StoreMeta",
    "Database",
]
