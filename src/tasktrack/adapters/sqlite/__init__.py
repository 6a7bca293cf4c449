"""SQLite adapter module - relational storage implementation."""

from tasktrack.adapters.sqlite.connection import DatabaseConnection, get_connection
from tasktrack.adapters.sqlite.session_repository import SqliteSessionRepository
from tasktrack.adapters.sqlite.task_repository import SqliteTaskRepository
from tasktrack.adapters.sqlite.user_repository import SqliteUserRepository

__all__ = [
    "DatabaseConnection",
    "get_connection",
    "SqliteUserRepository",
    "SqliteSessionRepository",
    "SqliteTaskRepository",
]
