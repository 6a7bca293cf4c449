"""SQLite implementation of UserRepository (the credential store)."""

from __future__ import annotations

import sqlite3
from typing import Any

from tasktrack.adapters.sqlite.base import SqliteRepository
from tasktrack.adapters.sqlite.connection import execute_with_retry
from tasktrack.adapters.sqlite.utils import USER_COLUMNS, build_update_clause, row_to_dict
from tasktrack.errors import EmailExistsError
from tasktrack.models import User
from tasktrack.repositories import UserRepository

_USER_FIELDS = (
    "id, email, password_hash, first_name, last_name, is_active, "
    "email_verified, created_at, updated_at"
)


def _is_email_conflict(error: sqlite3.IntegrityError) -> bool:
    return "users.email" in str(error)


def _row_to_user(row: sqlite3.Row | None) -> User | None:
    if row is None:
        return None
    data = row_to_dict(row)
    data["is_active"] = True if data["is_active"] is None else bool(data["is_active"])
    data["email_verified"] = bool(data["email_verified"])
    return User(**data)


class SqliteUserRepository(SqliteRepository, UserRepository):
    """SQLite implementation of the user repository."""

    async def get(self, user_id: str) -> User | None:
        return await self.run(self._get, user_id)

    async def get_by_email(self, email: str) -> User | None:
        return await self.run(self._get_by_email, email)

    async def add(self, user: User) -> User:
        """Insert a user.

        The UNIQUE constraint on ``users.email`` is the authority on
        uniqueness; a violation is reported as :class:`EmailExistsError` so a
        registration racing past the service's pre-check still gets a 409.
        """
        return await self.run(self._add, user)

    async def update(self, user_id: str, changes: dict[str, Any]) -> User | None:
        return await self.run(self._update, user_id, changes)

    async def list_all(self) -> list[User]:
        return await self.run(self._list_all)

    def _get(self, user_id: str) -> User | None:
        cursor = self.connection.execute(
            f"SELECT {_USER_FIELDS} FROM users WHERE id = ?", (user_id,)
        )
        return _row_to_user(cursor.fetchone())

    def _get_by_email(self, email: str) -> User | None:
        cursor = self.connection.execute(
            f"SELECT {_USER_FIELDS} FROM users WHERE email = ? LIMIT 1", (email,)
        )
        return _row_to_user(cursor.fetchone())

    def _add(self, user: User) -> User:
        try:
            execute_with_retry(
                self.connection,
                f"INSERT INTO users ({_USER_FIELDS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    user.id,
                    user.email,
                    user.password_hash,
                    user.first_name,
                    user.last_name,
                    int(user.is_active),
                    int(user.email_verified),
                    user.created_at,
                    user.updated_at,
                ),
            )
            self.connection.commit()
        except sqlite3.IntegrityError as e:
            self.connection.rollback()
            if _is_email_conflict(e):
                raise EmailExistsError("Email already registered") from e
            raise

        created = self._get(user.id)
        assert created is not None
        return created

    def _update(self, user_id: str, changes: dict[str, Any]) -> User | None:
        if not changes:
            return self._get(user_id)

        values = dict(changes)
        for flag in ("is_active", "email_verified"):
            if flag in values:
                values[flag] = int(bool(values[flag]))

        set_clause, params = build_update_clause(values, USER_COLUMNS)
        params.append(user_id)

        try:
            execute_with_retry(
                self.connection, f"UPDATE users SET {set_clause} WHERE id = ?", params
            )
            self.connection.commit()
        except sqlite3.IntegrityError as e:
            self.connection.rollback()
            if _is_email_conflict(e):
                raise EmailExistsError("Email already in use") from e
            raise

        return self._get(user_id)

    def _list_all(self) -> list[User]:
        cursor = self.connection.execute(
            f"SELECT {_USER_FIELDS} FROM users ORDER BY created_at ASC, email ASC"
        )
        return [user for row in cursor.fetchall() if (user := _row_to_user(row))]
