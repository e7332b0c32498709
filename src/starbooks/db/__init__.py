"""Database module for local SQLite storage."""

from .models import BookRecord, Setting
from .sqlite import Database, get_db, reset_db

__all__ = [
    "BookRecord",
    "Setting",
    "Database",
    "get_db",
    "reset_db",
]
