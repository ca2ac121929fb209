"""Database package."""
from festgate.db.session import engine, SessionLocal, get_db, get_db_context
from festgate.db.base import Base

__all__ = ["engine", "SessionLocal", "get_db", "get_db_context", "Base"]
