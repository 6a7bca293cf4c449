"""Core domain models for tasktrack.

All models serialise with camelCase field names (``firstName``, ``dueDate``)
and accept either camelCase or snake_case on input. Timestamps are integer
milliseconds since the Unix epoch.
"""

from __future__ import annotations

import math
from typing import Any, Literal

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from tasktrack.utils.timestamps import to_epoch_ms

TaskStatus = Literal["pending", "in_progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]
SortField = Literal["createdAt", "title", "dueDate", "priority", "status"]
SortOrder = Literal["asc", "desc"]

SORT_FIELDS: tuple[str, ...] = ("createdAt", "title", "dueDate", "priority", "status")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50
MAX_LIMIT = 1000
MAX_OFFSET = 2**63 - 1

# Due dates outside this range (years 1..9999) cannot be rendered as dates
MIN_EPOCH_MS = -62_135_596_800_000
MAX_EPOCH_MS = 253_402_300_799_999


class CamelModel(BaseModel):
    """Base model serialising to camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def _check_email(value: str) -> str:
    """Validate email syntax without normalising the stored value."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError("Invalid email address") from e
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value == "":
        return None
    return value


# ---------------------------------------------------------------------------
# Users and sessions
# ---------------------------------------------------------------------------


class User(CamelModel):
    """Full user record as stored, including the password hash.

    Never serialised to clients; use :func:`to_public_user`.
    """

    id: str
    email: str
    password_hash: str
    first_name: str | None = None
    last_name: str | None = None
    is_active: bool = True
    email_verified: bool = False
    created_at: int
    updated_at: int


class PublicUser(CamelModel):
    """The user fields allowed to leave the server."""

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    is_active: bool = True
    email_verified: bool = False
    created_at: int
    updated_at: int


def to_public_user(user: User) -> PublicUser:
    """Project a stored user onto its public representation."""
    return PublicUser(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        is_active=user.is_active,
        email_verified=user.email_verified,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class Session(CamelModel):
    """Server-side session record.

    Attributes:
        id: Opaque session id, also the cookie value
        user_id: Owning user
        expires_at: Expiry in epoch milliseconds
        created_at: Creation time in epoch milliseconds
        fresh: True when the session was just created or its expiry extended,
            meaning the client cookie should be re-issued
    """

    id: str
    user_id: str
    expires_at: int
    created_at: int | None = None
    fresh: bool = False


class SessionCookie(BaseModel):
    """Attributes of the session cookie sent to the browser."""

    name: str
    value: str
    max_age: int
    path: str = "/"
    http_only: bool = True
    secure: bool = False
    same_site: Literal["Strict", "Lax", "None"] = "Strict"

    def serialize(self) -> str:
        """Render the cookie as a ``Set-Cookie`` header value."""
        parts = [
            f"{self.name}={self.value}",
            f"Path={self.path}",
            f"Max-Age={self.max_age}",
        ]
        if self.http_only:
            parts.append("HttpOnly")
        if self.secure:
            parts.append("Secure")
        parts.append(f"SameSite={self.same_site}")
        return "; ".join(parts)


class RegisterRequest(CamelModel):
    """Body of ``POST /auth/register``."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=8)
    first_name: str | None = None
    last_name: str | None = None

    _email = field_validator("email")(_check_email)


class LoginRequest(CamelModel):
    """Body of ``POST /auth/login``."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ProfileUpdate(CamelModel):
    """Body of ``PUT /auth/profile``. Only provided fields change."""

    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    email: str | None = None

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("Email cannot be null")
        return _check_email(v)


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class Task(CamelModel):
    """Task record.

    Attributes:
        id: Store-assigned integer id
        user_id: Owning user
        title: Short title
        description: Optional longer text
        status: pending, in_progress or completed
        priority: low, medium or high
        due_date: Optional due date (epoch ms)
        category: Optional free-form label
        created_at: Creation timestamp (epoch ms)
        updated_at: Last update timestamp (epoch ms)
        completed_at: Set when status became completed, else None
    """

    id: int
    user_id: str
    title: str
    description: str | None = None
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"
    due_date: int | None = None
    category: str | None = None
    created_at: int
    updated_at: int
    completed_at: int | None = None


def _parse_due_date(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        epoch_ms = to_epoch_ms(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError("Invalid due date") from e
    if not MIN_EPOCH_MS <= epoch_ms <= MAX_EPOCH_MS:
        raise ValueError("Invalid due date")
    return epoch_ms


class TaskCreate(CamelModel):
    """Fields accepted when creating a task."""

    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"
    due_date: int | None = None
    category: str | None = Field(default=None, max_length=50)

    _blank = field_validator("description", "category", mode="before")(_blank_to_none)

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Any) -> int | None:
        return _parse_due_date(v)

    @field_validator("status", "priority", mode="before")
    @classmethod
    def default_when_null(cls, v: Any, info) -> Any:
        if v is None:
            return "pending" if info.field_name == "status" else "medium"
        return v


class TaskUpdate(CamelModel):
    """Partial task update. Only fields present in the input are applied.

    Presence is tracked through ``model_fields_set``; an explicit ``null``
    clears nullable fields (description, dueDate, category).
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: int | None = None
    category: str | None = Field(default=None, max_length=50)

    _blank = field_validator("description", "category", mode="before")(_blank_to_none)

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Any) -> int | None:
        return _parse_due_date(v)

    @model_validator(mode="after")
    def reject_null_required(self) -> TaskUpdate:
        for name in ("title", "status", "priority"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields that were present in the input."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class TaskFilters(CamelModel):
    """Filters, sort and pagination for listing tasks.

    ``"all"`` or ``None`` disables a filter. ``page`` and ``limit`` are clamped
    to a minimum of 1; ``limit`` is capped at ``MAX_LIMIT`` and ``page`` so
    that the offset stays within a 64-bit integer.
    """

    status: str | None = None
    priority: str | None = None
    category: str | None = None
    search: str | None = None
    sort_by: SortField = "createdAt"
    sort_order: SortOrder = "desc"
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @field_validator("sort_by", mode="before")
    @classmethod
    def fallback_sort_field(cls, v: Any) -> str:
        return v if v in SORT_FIELDS else "createdAt"

    @field_validator("sort_order", mode="before")
    @classmethod
    def fallback_sort_order(cls, v: Any) -> str:
        return "asc" if v == "asc" else "desc"

    @field_validator("page", "limit", mode="after")
    @classmethod
    def clamp_minimum(cls, v: int) -> int:
        return max(v, 1)

    @model_validator(mode="after")
    def clamp_maximum(self) -> TaskFilters:
        # LIMIT and OFFSET must fit SQLite's signed 64-bit integers
        self.limit = min(self.limit, MAX_LIMIT)
        self.page = min(self.page, MAX_OFFSET // self.limit + 1)
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def active(self, name: str) -> str | None:
        """Return a filter value unless it is unset or ``"all"``."""
        value = getattr(self, name)
        if value is None or value == "all" or value == "":
            return None
        return value


class TaskPage(BaseModel):
    """A page of tasks plus the unpaginated match count."""

    tasks: list[Task] = Field(default_factory=list)
    total: int = 0

    def total_pages(self, limit: int) -> int:
        return math.ceil(self.total / limit) if limit > 0 else 0
