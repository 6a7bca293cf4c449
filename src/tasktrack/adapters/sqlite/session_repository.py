"""SQLite implementation of SessionRepository."""

from __future__ import annotations

from tasktrack.adapters.sqlite.base import SqliteRepository
from tasktrack.adapters.sqlite.connection import execute_with_retry
from tasktrack.adapters.sqlite.utils import row_to_dict
from tasktrack.models import Session
from tasktrack.repositories import SessionRepository


class SqliteSessionRepository(SqliteRepository, SessionRepository):
    """SQLite implementation of the session repository."""

    async def add(self, session: Session) -> Session:
        await self.run(
            self._write,
            "INSERT INTO sessions (id, user_id, expires_at, created_at) VALUES (?, ?, ?, ?)",
            (session.id, session.user_id, session.expires_at, session.created_at),
        )
        return session

    async def get(self, session_id: str) -> Session | None:
        return await self.run(self._get, session_id)

    async def update_expiry(self, session_id: str, expires_at: int) -> None:
        await self.run(
            self._write,
            "UPDATE sessions SET expires_at = ? WHERE id = ?",
            (expires_at, session_id),
        )

    async def delete(self, session_id: str) -> None:
        await self.run(self._write, "DELETE FROM sessions WHERE id = ?", (session_id,))

    async def delete_for_user(self, user_id: str) -> int:
        return await self.run(
            self._write, "DELETE FROM sessions WHERE user_id = ?", (user_id,)
        )

    async def delete_expired(self, now: int) -> int:
        return await self.run(
            self._write, "DELETE FROM sessions WHERE expires_at <= ?", (now,)
        )

    def _get(self, session_id: str) -> Session | None:
        row = self.connection.execute(
            "SELECT id, user_id, expires_at, created_at FROM sessions WHERE id = ?",
            (session_id,),
        ).fetchone()
        if row is None:
            return None
        return Session(**row_to_dict(row))

    def _write(self, sql: str, params: tuple) -> int:
        """Execute and commit one statement; returns the affected row count."""
        cursor = execute_with_retry(self.connection, sql, params)
        self.connection.commit()
        return cursor.rowcount
