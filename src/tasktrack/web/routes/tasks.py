"""Task routes. Every route requires a session and only sees the caller's tasks."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from tasktrack.config import Config
from tasktrack.errors import InvalidIdError
from tasktrack.models import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    PublicUser,
    TaskCreate,
    TaskFilters,
    TaskUpdate,
)
from tasktrack.services import TaskService
from tasktrack.web.dependencies import get_config, get_task_service, require_user
from tasktrack.web.errors import operation

router = APIRouter(prefix="/tasks", tags=["tasks"])


def coerce_int(value: str | None, default: int) -> int:
    """Parse a query parameter as an integer, falling back to ``default``."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def parse_task_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidIdError("Invalid task ID") from e


@router.get("")
async def list_tasks(
    status: str | None = None,
    priority: str | None = None,
    category: str | None = None,
    search: str | None = None,
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
    page: str | None = None,
    limit: str | None = None,
    user: PublicUser = Depends(require_user),
    tasks: TaskService = Depends(get_task_service),
    config: Config = Depends(get_config),
):
    """List the caller's tasks with filters, sorting and pagination."""
    filters = TaskFilters(
        status=status,
        priority=priority,
        category=category,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=coerce_int(page, DEFAULT_PAGE),
        limit=coerce_int(limit, DEFAULT_LIMIT),
    )

    with operation(
        "FETCH_ERROR", "Failed to fetch tasks", expose_details=not config.is_production
    ):
        result = await tasks.list_tasks(user.id, filters)

    return {
        "tasks": [task.to_json() for task in result.tasks],
        "total": result.total,
        "pagination": {
            "page": filters.page,
            "limit": filters.limit,
            "total": result.total,
            "totalPages": result.total_pages(filters.limit),
        },
        "filters": {
            "status": status or "all",
            "priority": priority or "all",
            "category": category or "all",
            "search": search or "",
        },
    }


@router.post("", status_code=201)
async def create_task(
    data: TaskCreate,
    user: PublicUser = Depends(require_user),
    tasks: TaskService = Depends(get_task_service),
    config: Config = Depends(get_config),
):
    with operation(
        "CREATE_ERROR", "Failed to create task", expose_details=not config.is_production
    ):
        task = await tasks.create_task(user.id, data)
    return {"task": task.to_json(), "message": "Task created successfully"}


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    data: TaskUpdate,
    user: PublicUser = Depends(require_user),
    tasks: TaskService = Depends(get_task_service),
    config: Config = Depends(get_config),
):
    """Apply a partial update to one of the caller's tasks."""
    resolved_id = parse_task_id(task_id)
    with operation(
        "UPDATE_ERROR", "Failed to update task", expose_details=not config.is_production
    ):
        task = await tasks.update_task(user.id, resolved_id, data)
    return {"task": task.to_json(), "message": "Task updated successfully"}


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    user: PublicUser = Depends(require_user),
    tasks: TaskService = Depends(get_task_service),
    config: Config = Depends(get_config),
):
    resolved_id = parse_task_id(task_id)
    with operation(
        "DELETE_ERROR", "Failed to delete task", expose_details=not config.is_production
    ):
        await tasks.delete_task(user.id, resolved_id)
    return {"message": "Task deleted successfully"}
