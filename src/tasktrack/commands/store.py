"""Opening the configured database for operator commands."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from tasktrack.adapters.sqlite import (
    DatabaseConnection,
    SqliteSessionRepository,
    SqliteUserRepository,
)
from tasktrack.commands.decorators import AppError
from tasktrack.config import Config, get_config_manager
from tasktrack.services import AuthService, PasswordService, SessionService
from tasktrack.utils.exit_codes import ERROR_DATABASE


@dataclass
class Store:
    """An open database plus the services commands need."""

    config: Config
    path: Path
    connection: sqlite3.Connection

    def session_service(self) -> SessionService:
        return SessionService(
            SqliteSessionRepository(self.connection),
            SqliteUserRepository(self.connection),
            ttl_ms=self.config.auth.session_ttl_ms,
            cookie_name=self.config.auth.cookie_name,
        )

    def auth_service(self) -> AuthService:
        return AuthService(
            SqliteUserRepository(self.connection),
            self.session_service(),
            PasswordService(rounds=self.config.auth.bcrypt_rounds),
        )


@contextmanager
def open_store() -> Iterator[Store]:
    """Open and migrate the configured database for the duration of a command.

    Raises:
        AppError: If the database cannot be opened or migrated
    """
    config = get_config_manager().config
    path = config.resolve_database_path()
    database = DatabaseConnection(path, timeout=config.database.timeout)
    try:
        connection = database.connection
    except (sqlite3.Error, RuntimeError, OSError) as e:
        raise AppError(f"Could not open database {path}: {e}", ERROR_DATABASE) from e

    try:
        yield Store(config=config, path=path, connection=connection)
    finally:
        database.close()
