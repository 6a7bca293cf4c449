"""Authentication service - registration, login, logout and profile updates.

Thin orchestration over the password hasher, the session manager and the
user repository. Every user returned from here is a :class:`PublicUser`;
the password hash never leaves this layer.
"""

from __future__ import annotations

from collections.abc import Callable

import anyio

from tasktrack.adapters.sqlite.utils import generate_uuid
from tasktrack.errors import (
    AccountDeactivatedError,
    EmailExistsError,
    InvalidCredentialsError,
    NotFoundError,
)
from tasktrack.models import (
    LoginRequest,
    ProfileUpdate,
    PublicUser,
    RegisterRequest,
    SessionCookie,
    User,
    to_public_user,
)
from tasktrack.repositories import UserRepository
from tasktrack.services.password_service import PasswordService
from tasktrack.services.session_service import SessionService
from tasktrack.utils.logger import get_logger
from tasktrack.utils.timestamps import now_ms


class AuthService:
    """Service for authentication and account operations."""

    def __init__(
        self,
        user_repository: UserRepository,
        session_service: SessionService,
        password_service: PasswordService,
        *,
        clock: Callable[[], int] = now_ms,
    ):
        self.users = user_repository
        self.sessions = session_service
        self.passwords = password_service
        self.clock = clock

    # bcrypt is CPU bound and runs on a worker thread
    async def _hash(self, password: str) -> str:
        return await anyio.to_thread.run_sync(
            self.passwords.hash_password, password, abandon_on_cancel=True
        )

    async def _verify(self, password: str, password_hash: str) -> bool:
        return await anyio.to_thread.run_sync(
            self.passwords.verify_password, password, password_hash, abandon_on_cancel=True
        )

    async def register(self, data: RegisterRequest) -> tuple[PublicUser, SessionCookie]:
        """Create an account and log it in.

        The email pre-check gives the common case a clean answer; concurrent
        registrations that both pass it are settled by the store's unique
        constraint, which the repository reports as EmailExistsError too.

        Raises:
            EmailExistsError: If the email is already registered
        """
        if await self.users.get_by_email(data.email) is not None:
            raise EmailExistsError("Email already registered")

        now = self.clock()
        user = User(
            id=generate_uuid(),
            email=data.email,
            password_hash=await self._hash(data.password),
            first_name=data.first_name or None,
            last_name=data.last_name or None,
            created_at=now,
            updated_at=now,
        )
        created = await self.users.add(user)
        _, cookie = await self.sessions.create_session(created.id)

        get_logger().info("registered user %s", created.id)
        return to_public_user(created), cookie

    async def login(self, data: LoginRequest) -> tuple[PublicUser, SessionCookie]:
        """Check credentials and open a session.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            AccountDeactivatedError: The account has been deactivated
        """
        user = await self.users.get_by_email(data.email)
        if user is None:
            get_logger().info("login failed: unknown email")
            raise InvalidCredentialsError("Invalid email or password")

        if not user.is_active:
            get_logger().info("login refused for deactivated user %s", user.id)
            raise AccountDeactivatedError("Account is deactivated")

        if not await self._verify(data.password, user.password_hash):
            get_logger().info("login failed for user %s: bad password", user.id)
            raise InvalidCredentialsError("Invalid email or password")

        _, cookie = await self.sessions.create_session(user.id)
        get_logger().info("user %s logged in", user.id)
        return to_public_user(user), cookie

    async def logout(self, session_id: str | None) -> SessionCookie:
        """End the session behind ``session_id`` if it resolves to a user.

        Always returns the blank cookie so the browser drops its copy.
        """
        if session_id:
            user, _ = await self.sessions.validate_session(session_id)
            if user is not None:
                await self.sessions.invalidate_session(session_id)
                get_logger().info("user %s logged out", user.id)
        return self.sessions.blank_cookie()

    async def update_profile(self, user: PublicUser, data: ProfileUpdate) -> PublicUser:
        """Apply a partial profile update.

        Empty names are stored as null. Changing the email clears the
        verified flag.

        Raises:
            EmailExistsError: If the new email belongs to another account
            NotFoundError: If the user disappeared in the meantime
        """
        provided = data.model_fields_set
        changes: dict[str, object] = {"updated_at": self.clock()}

        if "first_name" in provided:
            changes["first_name"] = data.first_name or None
        if "last_name" in provided:
            changes["last_name"] = data.last_name or None
        if "email" in provided and data.email != user.email:
            existing = await self.users.get_by_email(data.email)
            if existing is not None and existing.id != user.id:
                raise EmailExistsError("Email already in use")
            changes["email"] = data.email
            changes["email_verified"] = False

        updated = await self.users.update(user.id, changes)
        if updated is None:
            raise NotFoundError("User not found")
        return to_public_user(updated)

    async def set_active(self, email: str, active: bool) -> PublicUser:
        """Activate or soft-deactivate an account.

        Deactivation also revokes the account's sessions; validation would
        reject them anyway, this just reclaims the rows.

        Raises:
            NotFoundError: If no account has this email
        """
        user = await self.users.get_by_email(email)
        if user is None:
            raise NotFoundError(f"No user with email {email}")

        updated = await self.users.update(
            user.id, {"is_active": active, "updated_at": self.clock()}
        )
        assert updated is not None
        if not active:
            revoked = await self.sessions.invalidate_user_sessions(user.id)
            get_logger().info(
                "deactivated user %s, revoked %d session(s)", user.id, revoked
            )
        else:
            get_logger().info("reactivated user %s", user.id)
        return to_public_user(updated)

    async def list_users(self) -> list[PublicUser]:
        """List every account."""
        return [to_public_user(user) for user in await self.users.list_all()]
