"""Repository interfaces (ports) for tasktrack storage."""

from tasktrack.repositories.repository import (
    SessionRepository,
    TaskRepository,
    UserRepository,
)

__all__ = [
    "UserRepository",
    "SessionRepository",
    "TaskRepository",
]
