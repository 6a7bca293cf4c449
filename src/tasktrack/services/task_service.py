"""Task service - business logic for task operations.

This service sits between the HTTP routes and the task repository. Every
operation takes the requesting user's id and is scoped to it, so a task
owned by someone else is indistinguishable from a missing one.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from tasktrack.errors import NotFoundError
from tasktrack.models import Task, TaskCreate, TaskFilters, TaskPage, TaskUpdate
from tasktrack.repositories import TaskRepository
from tasktrack.utils.timestamps import now_ms


def apply_status_transition(
    changes: dict[str, Any], existing: Task, now: int
) -> dict[str, Any]:
    """Stamp or clear ``completed_at`` for a status present in ``changes``.

    Moving to ``completed`` stamps ``completed_at`` only if it was unset;
    any other status clears it, even when the status itself is unchanged.
    """
    if "status" not in changes:
        return changes
    if changes["status"] == "completed":
        if existing.completed_at is None:
            changes["completed_at"] = now
    else:
        changes["completed_at"] = None
    return changes


class TaskService:
    """Service for task business logic.

    Orchestrates listing, creation, partial update and deletion through the
    task repository.
    """

    def __init__(
        self,
        task_repository: TaskRepository,
        *,
        clock: Callable[[], int] = now_ms,
    ):
        """Initialize the task service.

        Args:
            task_repository: TaskRepository implementation for data access
            clock: Returns the current time in epoch milliseconds
        """
        self.repository = task_repository
        self.clock = clock

    async def list_tasks(self, user_id: str, filters: TaskFilters) -> TaskPage:
        """List a user's tasks with filtering, sorting and pagination.

        Args:
            user_id: Owner whose tasks are listed
            filters: Filter, sort and page parameters

        Returns:
            TaskPage with the requested page and the total match count
        """
        return await self.repository.list_page(user_id, filters)

    async def get_task(self, user_id: str, task_id: int) -> Task:
        """Get one owned task.

        Raises:
            NotFoundError: If the task does not exist for this user
        """
        task = await self.repository.get(user_id, task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def create_task(self, user_id: str, task_data: TaskCreate) -> Task:
        """Create a task owned by ``user_id``."""
        return await self.repository.add(user_id, task_data, self.clock())

    async def update_task(
        self, user_id: str, task_id: int, updates: TaskUpdate
    ) -> Task:
        """Apply a partial update to an owned task.

        Only fields present in ``updates`` change; ``updated_at`` is always
        refreshed.

        Raises:
            NotFoundError: If the task does not exist for this user
        """
        existing = await self.get_task(user_id, task_id)

        now = self.clock()
        changes = apply_status_transition(updates.changes(), existing, now)
        changes["updated_at"] = now

        updated = await self.repository.update(user_id, task_id, changes)
        if updated is None:
            raise NotFoundError("Task not found")
        return updated

    async def delete_task(self, user_id: str, task_id: int) -> None:
        """Delete an owned task.

        Not idempotent: deleting twice raises NotFoundError the second time.

        Raises:
            NotFoundError: If the task does not exist for this user
        """
        if not await self.repository.delete(user_id, task_id):
            raise NotFoundError("Task not found")
