"""SQLite implementation of TaskRepository."""

from __future__ import annotations

import sqlite3
from typing import Any

from tasktrack.adapters.sqlite.base import SqliteRepository
from tasktrack.adapters.sqlite.connection import execute_with_retry
from tasktrack.adapters.sqlite.utils import TASK_COLUMNS, build_update_clause, row_to_dict
from tasktrack.models import Task, TaskCreate, TaskFilters, TaskPage
from tasktrack.repositories import TaskRepository

_TASK_FIELDS = (
    "id, user_id, title, description, status, priority, due_date, category, "
    "created_at, updated_at, completed_at"
)

# API sort keys to columns. priority and status sort by their text value.
SORT_COLUMNS = {
    "createdAt": "created_at",
    "title": "title",
    "dueDate": "due_date",
    "priority": "priority",
    "status": "status",
}


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_task_query(user_id: str, filters: TaskFilters) -> tuple[str, list[Any]]:
    """Build the WHERE clause shared by the page query and the count query.

    Returns:
        Tuple of (WHERE clause without the keyword, parameters list)
    """
    conditions = ["user_id = ?"]
    params: list[Any] = [user_id]

    for name in ("status", "priority", "category"):
        value = filters.active(name)
        if value is not None:
            conditions.append(f"{name} = ?")
            params.append(value)

    if filters.search:
        conditions.append(
            "(title LIKE ? ESCAPE '\\' OR description LIKE ? ESCAPE '\\')"
        )
        search_term = f"%{escape_like(filters.search)}%"
        params.extend([search_term, search_term])

    return " AND ".join(conditions), params


def _row_to_task(row: sqlite3.Row) -> Task:
    return Task(**row_to_dict(row))


class SqliteTaskRepository(SqliteRepository, TaskRepository):
    """SQLite implementation of task repository."""

    async def list_page(self, user_id: str, filters: TaskFilters) -> TaskPage:
        """List one page of a user's tasks.

        ``id`` is appended as a tiebreaker in the chosen direction so that
        rows with equal sort keys keep a stable order across pages.
        """
        return await self.run(self._list_page, user_id, filters)

    async def get(self, user_id: str, task_id: int) -> Task | None:
        return await self.run(self._get, user_id, task_id)

    async def add(self, user_id: str, task_data: TaskCreate, now: int) -> Task:
        """Create a new task."""
        return await self.run(self._add, user_id, task_data, now)

    async def update(
        self, user_id: str, task_id: int, changes: dict[str, Any]
    ) -> Task | None:
        """Update an existing task owned by ``user_id``."""
        return await self.run(self._update, user_id, task_id, changes)

    async def delete(self, user_id: str, task_id: int) -> bool:
        return await self.run(self._delete, user_id, task_id)

    def _list_page(self, user_id: str, filters: TaskFilters) -> TaskPage:
        where, params = build_task_query(user_id, filters)
        direction = "ASC" if filters.sort_order == "asc" else "DESC"
        column = SORT_COLUMNS[filters.sort_by]

        cursor = self.connection.execute(
            f"SELECT {_TASK_FIELDS} FROM tasks WHERE {where} "
            f"ORDER BY {column} {direction}, id {direction} LIMIT ? OFFSET ?",
            [*params, filters.limit, filters.offset],
        )
        tasks = [_row_to_task(row) for row in cursor.fetchall()]

        count_cursor = self.connection.execute(
            f"SELECT COUNT(*) FROM tasks WHERE {where}", params
        )
        total = count_cursor.fetchone()[0]

        return TaskPage(tasks=tasks, total=total)

    def _get(self, user_id: str, task_id: int) -> Task | None:
        cursor = self.connection.execute(
            f"SELECT {_TASK_FIELDS} FROM tasks WHERE id = ? AND user_id = ?",
            (task_id, user_id),
        )
        row = cursor.fetchone()
        return _row_to_task(row) if row else None

    def _add(self, user_id: str, task_data: TaskCreate, now: int) -> Task:
        completed_at = now if task_data.status == "completed" else None
        cursor = execute_with_retry(
            self.connection,
            """INSERT INTO tasks (
                user_id, title, description, status, priority, due_date,
                category, created_at, updated_at, completed_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                user_id,
                task_data.title,
                task_data.description,
                task_data.status,
                task_data.priority,
                task_data.due_date,
                task_data.category,
                now,
                now,
                completed_at,
            ),
        )
        self.connection.commit()

        task = self._get(user_id, cursor.lastrowid)
        assert task is not None
        return task

    def _update(self, user_id: str, task_id: int, changes: dict[str, Any]) -> Task | None:
        if changes:
            set_clause, params = build_update_clause(changes, TASK_COLUMNS)
            params.extend([task_id, user_id])
            execute_with_retry(
                self.connection,
                f"UPDATE tasks SET {set_clause} WHERE id = ? AND user_id = ?",
                params,
            )
            self.connection.commit()

        return self._get(user_id, task_id)

    def _delete(self, user_id: str, task_id: int) -> bool:
        cursor = execute_with_retry(
            self.connection,
            "DELETE FROM tasks WHERE id = ? AND user_id = ?",
            (task_id, user_id),
        )
        self.connection.commit()
        return cursor.rowcount > 0
