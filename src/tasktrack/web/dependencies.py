"""FastAPI dependencies: service lookup and the authentication gate.

Services live on ``app.state`` (wired by :func:`tasktrack.web.app.create_app`)
and are looked up per request, so tests can build an app around their own
connection.

Two gate shapes are provided:

- :func:`get_optional_user` resolves the session cookie to a user or ``None``
- :func:`require_user` does the same but rejects the request with 401
  before the route body runs
"""

from __future__ import annotations

import sqlite3

from fastapi import Depends, Request, Response

from tasktrack.config import Config
from tasktrack.errors import UnauthorizedError
from tasktrack.models import PublicUser, SessionCookie
from tasktrack.services import AuthService, SessionService, TaskService
from tasktrack.utils.logger import get_logger


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_session_service(request: Request) -> SessionService:
    return request.app.state.session_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def attach_cookie(response: Response, cookie: SessionCookie) -> None:
    """Add a ``Set-Cookie`` header for ``cookie`` to the outgoing response."""
    response.headers.append("set-cookie", cookie.serialize())


async def get_optional_user(
    request: Request,
    response: Response,
    sessions: SessionService = Depends(get_session_service),
) -> PublicUser | None:
    """Resolve the session cookie to its user, or ``None``.

    A renewed session gets its cookie re-issued on the response. Store
    failures are logged and treated as "no user".
    """
    session_id = request.cookies.get(sessions.cookie_name)
    if not session_id:
        return None

    try:
        user, session = await sessions.validate_session(session_id)
    except sqlite3.Error as e:
        get_logger().error("session validation failed: %s", str(e))
        return None

    if user is not None and session is not None and session.fresh:
        attach_cookie(response, sessions.session_cookie(session.id))
    return user


async def require_user(
    user: PublicUser | None = Depends(get_optional_user),
) -> PublicUser:
    """Hard gate for protected routes.

    Raises:
        UnauthorizedError: If the request carries no valid session
    """
    if user is None:
        raise UnauthorizedError("Unauthorized - Authentication required")
    return user
