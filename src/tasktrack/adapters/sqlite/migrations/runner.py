"""Forward-only schema migrations.

A migration is a numbered list of SQL statements. Applied versions are
recorded in ``schema_version``; opening a database applies every newer
migration in order, each inside its own transaction.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any

from tasktrack.utils.timestamps import now_ms


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    statements: tuple[str, ...]


def _ensure_version_table(connection: sqlite3.Connection) -> None:
    connection.execute(
        """CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER PRIMARY KEY,
            description TEXT NOT NULL,
            applied_at INTEGER NOT NULL
        )"""
    )
    connection.commit()


def current_version(connection: sqlite3.Connection) -> int:
    """Highest applied migration version, 0 for an empty database."""
    _ensure_version_table(connection)
    (version,) = connection.execute("SELECT MAX(version) FROM schema_version").fetchone()
    return version or 0


def apply_migrations(connection: sqlite3.Connection, migrations: list[Migration]) -> int:
    """Apply the migrations newer than the recorded version.

    Returns:
        Number of migrations applied

    Raises:
        RuntimeError: If a migration fails; its statements are rolled back
    """
    applied = current_version(connection)
    pending = sorted((m for m in migrations if m.version > applied), key=lambda m: m.version)

    for migration in pending:
        try:
            connection.execute("BEGIN")
            for statement in migration.statements:
                connection.execute(statement)
            connection.execute(
                "INSERT INTO schema_version (version, description, applied_at) VALUES (?, ?, ?)",
                (migration.version, migration.description, now_ms()),
            )
            connection.commit()
        except sqlite3.Error as e:
            connection.rollback()
            raise RuntimeError(f"Migration {migration.version} failed: {e}") from e

    return len(pending)


def migration_history(connection: sqlite3.Connection) -> list[dict[str, Any]]:
    """Applied migrations, oldest first."""
    _ensure_version_table(connection)
    rows = connection.execute(
        "SELECT version, description, applied_at FROM schema_version ORDER BY version"
    ).fetchall()
    return [
        {"version": version, "description": description, "applied_at": applied_at}
        for version, description, applied_at in rows
    ]
