"""tasktrack domain models.

Pydantic models for users, sessions and tasks, used for validation at the
HTTP boundary and as the values passed between services and repositories.
"""

from .core import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    DEFAULT_PAGE,
    LoginRequest,
    ProfileUpdate,
    PublicUser,
    RegisterRequest,
    Session,
    SessionCookie,
    Task,
    TaskCreate,
    TaskFilters,
    TaskPage,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
    User,
    to_public_user,
)

__all__ = [
    # User models
    "User",
    "PublicUser",
    "to_public_user",
    "RegisterRequest",
    "LoginRequest",
    "ProfileUpdate",
    # Session models
    "Session",
    "SessionCookie",
    # Task models
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskFilters",
    "TaskPage",
    "TaskStatus",
    "TaskPriority",
    "DEFAULT_PAGE",
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
]
