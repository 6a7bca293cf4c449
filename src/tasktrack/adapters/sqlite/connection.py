"""Database connection management for the tasktrack SQLite store.

A :class:`DatabaseConnection` owns exactly one configured ``sqlite3``
connection (foreign keys on, WAL journal, row factory, busy timeout) and
brings the schema up to date when opened. The application factory creates
one and hands the connection to every repository; nothing in the request
path reaches for a module-level handle.
"""

from __future__ import annotations

import os
import sqlite3
import time
from pathlib import Path

from tasktrack.adapters.sqlite.migrations import ALL_MIGRATIONS, apply_migrations
from tasktrack.utils.logger import get_logger

MEMORY_DATABASE = ":memory:"


class DatabaseConnection:
    """Connection manager for the SQLite store.

    Provides:
    - One shared connection for the process that created it
    - WAL mode for concurrent readers
    - Foreign key constraint enforcement (cascade deletes)
    - Automatic directory creation and owner-only file permissions
    - Schema migrations on open
    """

    def __init__(self, db_path: str | Path, timeout: float = 30.0):
        self.db_path = db_path if db_path == MEMORY_DATABASE else Path(db_path)
        self.timeout = timeout
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get the open connection, opening it on first use."""
        if self._connection is None:
            self._connection = self.open()
        return self._connection

    def open(self) -> sqlite3.Connection:
        """Open, configure and migrate a new connection."""
        is_new_database = False
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            is_new_database = not self.db_path.exists()

        connection = sqlite3.connect(
            str(self.db_path),
            check_same_thread=False,  # Shared by the server's worker threads
            timeout=self.timeout,  # Wait for locks held by other writers
        )
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        if isinstance(self.db_path, Path):
            connection.execute("PRAGMA journal_mode = WAL")

        if is_new_database and isinstance(self.db_path, Path):
            os.chmod(self.db_path, 0o600)

        applied = run_all_migrations(connection)
        if applied:
            get_logger().info(
                "applied %d migration(s) to %s", applied, self.db_path
            )
        return connection

    def close(self) -> None:
        """Close the connection, committing pending work."""
        if self._connection is None:
            return
        try:
            self._connection.commit()
            self._connection.close()
        finally:
            self._connection = None

    def __enter__(self) -> sqlite3.Connection:
        return self.connection

    def __exit__(self, *exc_info) -> None:
        self.close()


def run_all_migrations(connection: sqlite3.Connection) -> int:
    """Apply every pending migration; returns the number applied."""
    return apply_migrations(connection, ALL_MIGRATIONS)


def execute_with_retry(
    connection: sqlite3.Connection,
    sql: str,
    params: tuple | list | dict | None = None,
    max_retries: int = 3,
) -> sqlite3.Cursor:
    """Execute SQL with retry logic for database locked errors.

    Raises:
        sqlite3.OperationalError: If database remains locked after retries
    """
    for attempt in range(max_retries):
        try:
            if params:
                return connection.execute(sql, params)
            return connection.execute(sql)
        except sqlite3.OperationalError as e:
            if "database is locked" in str(e) and attempt < max_retries - 1:
                # Exponential backoff: 0.1s, 0.2s, 0.4s
                time.sleep(0.1 * (2**attempt))
                continue
            raise

    raise sqlite3.OperationalError("Max retries exceeded")


def get_connection(db_path: str | Path, timeout: float = 30.0) -> sqlite3.Connection:
    """Open a configured, migrated connection to ``db_path``."""
    return DatabaseConnection(db_path, timeout=timeout).connection
