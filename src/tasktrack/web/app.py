"""FastAPI application factory.

:func:`create_app` wires one database connection into the repositories and
services, stores them on ``app.state``, installs the error envelope handlers
and the request logging / deadline middleware, and mounts the routers.
"""

from __future__ import annotations

import asyncio
import sqlite3
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response

from tasktrack import __version__
from tasktrack.adapters.sqlite import (
    DatabaseConnection,
    SqliteSessionRepository,
    SqliteTaskRepository,
    SqliteUserRepository,
)
from tasktrack.config import Config, get_config_manager
from tasktrack.errors import RequestTimeoutError
from tasktrack.services import AuthService, PasswordService, SessionService, TaskService
from tasktrack.utils.logger import get_logger
from tasktrack.web.errors import error_response, register_exception_handlers
from tasktrack.web.routes import auth, tasks


def build_services(app: FastAPI, config: Config, connection: sqlite3.Connection) -> None:
    """Create repositories and services around ``connection`` on ``app.state``."""
    users = SqliteUserRepository(connection)
    sessions = SqliteSessionRepository(connection)
    task_repository = SqliteTaskRepository(connection)

    session_service = SessionService(
        sessions,
        users,
        ttl_ms=config.auth.session_ttl_ms,
        cookie_name=config.auth.cookie_name,
        secure_cookies=config.is_production,
    )

    app.state.config = config
    app.state.session_service = session_service
    app.state.auth_service = AuthService(
        users, session_service, PasswordService(rounds=config.auth.bcrypt_rounds)
    )
    app.state.task_service = TaskService(task_repository)


def add_middleware(app: FastAPI, request_timeout: float) -> None:
    """Install request logging and the per-request deadline."""

    @app.middleware("http")
    async def enforce_deadline(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=request_timeout)
        except asyncio.TimeoutError:
            get_logger().warning(
                "%s %s timed out after %.1fs",
                request.method,
                request.url.path,
                request_timeout,
            )
            return error_response(RequestTimeoutError("Request timed out"))

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        get_logger().info(
            "%s %s -> %d (%.3fs)",
            request.method,
            request.url.path,
            response.status_code,
            time.monotonic() - start,
        )
        return response


def create_app(
    config: Config | None = None,
    connection: sqlite3.Connection | None = None,
) -> FastAPI:
    """Build the HTTP application.

    Args:
        config: Configuration to use; loaded from the default profile if omitted
        connection: Open, migrated connection to use instead of opening the
            configured database. The caller keeps ownership of it.

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = get_config_manager().config

    get_logger().setLevel(config.logging.level.upper())

    database: DatabaseConnection | None = None
    if connection is None:
        database = DatabaseConnection(
            config.resolve_database_path(), timeout=config.database.timeout
        )
        connection = database.connection

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        get_logger().info("tasktrack %s starting (%s)", __version__, config.environment)
        yield
        if database is not None:
            database.close()
        get_logger().info("tasktrack stopped")

    app = FastAPI(title="tasktrack", version=__version__, lifespan=lifespan)
    build_services(app, config, connection)
    register_exception_handlers(app)
    add_middleware(app, config.server.request_timeout)

    app.include_router(auth.router)
    app.include_router(tasks.router)
    return app


def get_app() -> FastAPI:
    """Factory entry point for ``uvicorn --factory``."""
    return create_app()
