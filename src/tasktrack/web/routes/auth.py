"""Account routes: register, login, logout, current user and profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from tasktrack.config import Config
from tasktrack.errors import UnauthorizedError
from tasktrack.models import LoginRequest, ProfileUpdate, PublicUser, RegisterRequest
from tasktrack.services import AuthService, SessionService
from tasktrack.web.dependencies import (
    attach_cookie,
    get_auth_service,
    get_config,
    get_optional_user,
    get_session_service,
    require_user,
)
from tasktrack.web.errors import operation

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
async def register(
    data: RegisterRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    config: Config = Depends(get_config),
):
    """Create an account and start a session for it."""
    with operation(
        "SERVER_ERROR", "Failed to create account", expose_details=not config.is_production
    ):
        user, cookie = await auth.register(data)
    attach_cookie(response, cookie)
    return {"user": user.to_json(), "message": "Account created successfully"}


@router.post("/login")
async def login(
    data: LoginRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    config: Config = Depends(get_config),
):
    with operation(
        "SERVER_ERROR", "Failed to log in", expose_details=not config.is_production
    ):
        user, cookie = await auth.login(data)
    attach_cookie(response, cookie)
    return {"user": user.to_json(), "message": "Logged in successfully"}


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    sessions: SessionService = Depends(get_session_service),
    config: Config = Depends(get_config),
):
    """End the current session. Succeeds even without one."""
    with operation(
        "SERVER_ERROR", "Failed to log out", expose_details=not config.is_production
    ):
        cookie = await auth.logout(request.cookies.get(sessions.cookie_name))
    attach_cookie(response, cookie)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def me(user: PublicUser | None = Depends(get_optional_user)):
    if user is None:
        raise UnauthorizedError("Not authenticated")
    return {"user": user.to_json()}


@router.put("/profile")
async def update_profile(
    data: ProfileUpdate,
    user: PublicUser = Depends(require_user),
    auth: AuthService = Depends(get_auth_service),
    config: Config = Depends(get_config),
):
    with operation(
        "UPDATE_ERROR", "Failed to update profile", expose_details=not config.is_production
    ):
        updated = await auth.update_profile(user, data)
    return {"user": updated.to_json(), "message": "Profile updated successfully"}
