"""Database models for Inkwell.

SQLAlchemy models for:
- Users
- Books and their ordered sections

All models use async SQLAlchemy (asyncpg for PostgreSQL, aiosqlite in tests).
"""

from .book import Book, Section
from .database import Base, close_db, create_tables, get_engine, get_session, init_db
from .user import User

__all__ = [
    # Database
    "Base",
    "init_db",
    "create_tables",
    "get_session",
    "get_engine",
    "close_db",
    # Models
    "User",
    "Book",
    "Section",
]
