"""Shared test fixtures and configuration.

Every test gets its own log directory, config directory and in-memory
database, so nothing touches the real user directories.
"""

from __future__ import annotations

import logging
import logging.handlers
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import tasktrack.config as config_mod
import tasktrack.utils.logger as logger_mod
from tasktrack.adapters.sqlite import (
    SqliteSessionRepository,
    SqliteTaskRepository,
    SqliteUserRepository,
    get_connection,
)
from tasktrack.adapters.sqlite.connection import MEMORY_DATABASE
from tasktrack.config import AuthConfig, Config
from tasktrack.services import AuthService, PasswordService, SessionService, TaskService
from tasktrack.web import create_app

START_MS = 1_700_000_000_000


class FakeClock:
    """Controllable millisecond clock."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """Point the application logger at a temporary directory."""
    logger_mod._logger = None
    with patch("tasktrack.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield
    logger = logging.getLogger("tasktrack")
    for handler in list(logger.handlers):
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            handler.close()
            logger.removeHandler(handler)
    logger_mod._logger = None


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep config and data files inside tmp_path and clear env overrides."""
    monkeypatch.delenv("TASKTRACK_ENV", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    config_mod._config_manager = None
    with patch("tasktrack.config.user_config_dir", return_value=str(tmp_path / "config")):
        with patch("tasktrack.config.user_data_dir", return_value=str(tmp_path / "data")):
            yield
    config_mod._config_manager = None


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


@pytest.fixture
def connection():
    """In-memory database with every migration applied."""
    conn = get_connection(MEMORY_DATABASE)
    yield conn
    conn.close()


@pytest.fixture
def seed_user(connection):
    """Insert a user row directly and return its id."""

    def _seed(
        user_id: str = "user-1",
        email: str = "user1@example.com",
        *,
        active: bool = True,
        password_hash: str = "not-a-real-hash",
    ) -> str:
        connection.execute(
            "INSERT INTO users (id, email, password_hash, is_active, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (user_id, email, password_hash, int(active), START_MS, START_MS),
        )
        connection.commit()
        return user_id

    return _seed


@pytest.fixture
def user_repository(connection):
    return SqliteUserRepository(connection)


@pytest.fixture
def session_repository(connection):
    return SqliteSessionRepository(connection)


@pytest.fixture
def task_repository(connection):
    return SqliteTaskRepository(connection)


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def password_service():
    # Minimum bcrypt cost keeps the suite fast
    return PasswordService(rounds=4)


@pytest.fixture
def session_service(session_repository, user_repository, clock):
    return SessionService(session_repository, user_repository, clock=clock)


@pytest.fixture
def auth_service(user_repository, session_service, password_service, clock):
    return AuthService(user_repository, session_service, password_service, clock=clock)


@pytest.fixture
def task_service(task_repository, clock):
    return TaskService(task_repository, clock=clock)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def app_config() -> Config:
    return Config(environment="test", auth=AuthConfig(bcrypt_rounds=4))


@pytest.fixture
def app(app_config, connection):
    return create_app(app_config, connection=connection)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register an account through the API and return the response."""

    def _register(email: str = "alice@example.com", password: str = "Password1", **extra):
        return client.post("/auth/register", json={"email": email, "password": password, **extra})

    return _register

