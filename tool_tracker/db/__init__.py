# Database package initialization
# Engine/session management, table models and seeding.

from .session import Base, SessionLocal, create_tables, get_db, get_engine

__all__ = [
    "Base",
    "SessionLocal",
    "create_tables",
    "get_db",
    "get_engine",
]
