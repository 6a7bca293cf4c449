"""Repository abstraction layer for tasktrack.

This module defines the abstract base classes (interfaces) for the three
stores the service depends on: credentials (users), sessions and tasks.

Services receive concrete repositories through their constructors, so the
business logic stays independent of the storage engine and tests can pass
in-memory databases or doubles.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from tasktrack.models import Session, Task, TaskCreate, TaskFilters, TaskPage, User


class UserRepository(ABC):
    """Abstract base class for user (credential) persistence."""

    @abstractmethod
    async def get(self, user_id: str) -> User | None:
        """Get a user by id, or None if absent."""

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Get a user by exact (case-sensitive) email, or None if absent."""

    @abstractmethod
    async def add(self, user: User) -> User:
        """Insert a new user.

        Raises:
            EmailExistsError: If the email is already taken
        """

    @abstractmethod
    async def update(self, user_id: str, changes: dict[str, Any]) -> User | None:
        """Apply column changes to a user and return the updated record.

        Raises:
            EmailExistsError: If an email change collides with another user
        """

    @abstractmethod
    async def list_all(self) -> list[User]:
        """List all users ordered by creation time."""


class SessionRepository(ABC):
    """Abstract base class for session persistence."""

    @abstractmethod
    async def add(self, session: Session) -> Session:
        """Persist a new session."""

    @abstractmethod
    async def get(self, session_id: str) -> Session | None:
        """Get a session by id, or None if absent."""

    @abstractmethod
    async def update_expiry(self, session_id: str, expires_at: int) -> None:
        """Move a session's expiry."""

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Delete a session. Deleting a missing session is not an error."""

    @abstractmethod
    async def delete_for_user(self, user_id: str) -> int:
        """Delete every session of a user and return how many were removed."""

    @abstractmethod
    async def delete_expired(self, now: int) -> int:
        """Delete sessions whose expiry is at or before ``now``."""


class TaskRepository(ABC):
    """Abstract base class for task persistence.

    Every method takes the owning user id and scopes its statement to it; a
    task belonging to another user behaves exactly like a missing one.
    """

    @abstractmethod
    async def list_page(self, user_id: str, filters: TaskFilters) -> TaskPage:
        """Return one page of matching tasks plus the unpaginated total."""

    @abstractmethod
    async def get(self, user_id: str, task_id: int) -> Task | None:
        """Get a task owned by ``user_id``, or None."""

    @abstractmethod
    async def add(self, user_id: str, task_data: TaskCreate, now: int) -> Task:
        """Insert a task and return it with its store-assigned id."""

    @abstractmethod
    async def update(
        self, user_id: str, task_id: int, changes: dict[str, Any]
    ) -> Task | None:
        """Apply column changes to an owned task; None if it does not exist."""

    @abstractmethod
    async def delete(self, user_id: str, task_id: int) -> bool:
        """Delete an owned task; False if nothing was deleted."""
