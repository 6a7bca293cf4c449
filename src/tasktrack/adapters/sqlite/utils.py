"""Utility functions for the SQLite adapter."""

from __future__ import annotations

import base64
import secrets
import uuid
from typing import Any

# Column names that may be written through build_update_clause
USER_COLUMNS = frozenset(
    {"email", "password_hash", "first_name", "last_name", "is_active",
     "email_verified", "updated_at"}
)
TASK_COLUMNS = frozenset(
    {"title", "description", "status", "priority", "due_date", "category",
     "updated_at", "completed_at"}
)


def generate_uuid() -> str:
    """Generate a new UUID as string."""
    return str(uuid.uuid4())


def generate_session_id() -> str:
    """Generate an opaque session id.

    25 random bytes encoded as 40 lowercase base32 characters.
    """
    return base64.b32encode(secrets.token_bytes(25)).decode("ascii").lower()


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert sqlite3.Row to dictionary."""
    if row is None:
        return {}
    return dict(row)


def build_update_clause(
    updates: dict[str, Any], allowed: frozenset[str]
) -> tuple[str, list[Any]]:
    """Build SQL UPDATE SET clause from updates dictionary.

    Unlike a filter, ``None`` values are kept and written as NULL.

    Raises:
        ValueError: If a key is not an allowed column
    """
    set_parts = []
    params = []

    for key, value in updates.items():
        if key not in allowed:
            raise ValueError(f"Unknown column: {key}")
        set_parts.append(f"{key} = ?")
        params.append(value)

    return ", ".join(set_parts), params
