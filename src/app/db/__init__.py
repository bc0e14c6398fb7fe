"""Database package - Session management and base models."""
from .session import (
    Base,
    DatabaseManager,
    DbSession,
    close_db,
    get_db,
    get_db_manager,
    init_db,
)

__all__ = [
    "Base",
    "DatabaseManager",
    "DbSession",
    "close_db",
    "get_db",
    "get_db_manager",
    "init_db",
]
