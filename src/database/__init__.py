"""Database models and initialization."""

from .db_manager import Song, db, initialize_database, utcnow

__all__ = ["Song", "db", "initialize_database", "utcnow"]
