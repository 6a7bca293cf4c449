"""Session management - issuing, validating and revoking login sessions.

A session is valid while its row exists, ``now < expires_at`` and its owner
is active. Validity is derived on every call rather than cached, so logout,
expiry and deactivation take effect on the very next request.

Sessions slide: once less than half of the lifetime remains, validation
pushes the expiry out by a full lifetime and marks the session ``fresh`` so
the caller re-issues the cookie.
"""

from __future__ import annotations

from collections.abc import Callable

from tasktrack.adapters.sqlite.utils import generate_session_id
from tasktrack.models import PublicUser, Session, SessionCookie, to_public_user
from tasktrack.repositories import SessionRepository, UserRepository
from tasktrack.utils.logger import get_logger
from tasktrack.utils.timestamps import now_ms

SESSION_COOKIE_NAME = "auth_session"
DEFAULT_SESSION_TTL_MS = 30 * 24 * 60 * 60 * 1000  # 30 days


class SessionService:
    """Issues, validates and revokes sessions and builds their cookies."""

    def __init__(
        self,
        session_repository: SessionRepository,
        user_repository: UserRepository,
        *,
        ttl_ms: int = DEFAULT_SESSION_TTL_MS,
        cookie_name: str = SESSION_COOKIE_NAME,
        secure_cookies: bool = False,
        clock: Callable[[], int] = now_ms,
    ):
        """Initialize the session service.

        Args:
            session_repository: Store for session rows
            user_repository: Store used to resolve session owners
            ttl_ms: Session lifetime in milliseconds
            cookie_name: Name of the session cookie
            secure_cookies: Whether cookies carry the ``Secure`` attribute
            clock: Returns the current time in epoch milliseconds
        """
        self.sessions = session_repository
        self.users = user_repository
        self.ttl_ms = ttl_ms
        self.cookie_name = cookie_name
        self.secure_cookies = secure_cookies
        self.clock = clock

    async def create_session(self, user_id: str) -> tuple[Session, SessionCookie]:
        """Create a session for ``user_id`` and the cookie that carries it."""
        now = self.clock()
        session = Session(
            id=generate_session_id(),
            user_id=user_id,
            expires_at=now + self.ttl_ms,
            created_at=now,
            fresh=True,
        )
        await self.sessions.add(session)
        return session, self.session_cookie(session.id)

    async def validate_session(
        self, session_id: str
    ) -> tuple[PublicUser | None, Session | None]:
        """Resolve a session id to its user.

        Returns:
            ``(user, session)`` for a valid session, otherwise ``(None, None)``
        """
        session = await self.sessions.get(session_id)
        if session is None:
            return None, None

        now = self.clock()
        if now >= session.expires_at:
            await self.sessions.delete(session.id)
            return None, None

        user = await self.users.get(session.user_id)
        if user is None or not user.is_active:
            return None, None

        if session.expires_at - now < self.ttl_ms // 2:
            session.expires_at = now + self.ttl_ms
            session.fresh = True
            await self.sessions.update_expiry(session.id, session.expires_at)

        return to_public_user(user), session

    async def invalidate_session(self, session_id: str) -> None:
        """Revoke a session. Revoking a missing session is a no-op."""
        await self.sessions.delete(session_id)

    async def invalidate_user_sessions(self, user_id: str) -> int:
        """Revoke every session belonging to ``user_id``."""
        return await self.sessions.delete_for_user(user_id)

    async def delete_expired_sessions(self) -> int:
        """Remove expired session rows. Storage reclamation only."""
        removed = await self.sessions.delete_expired(self.clock())
        get_logger().info("purged %d expired session(s)", removed)
        return removed

    def session_cookie(self, session_id: str) -> SessionCookie:
        """Cookie carrying ``session_id`` for the full session lifetime."""
        return SessionCookie(
            name=self.cookie_name,
            value=session_id,
            max_age=self.ttl_ms // 1000,
            secure=self.secure_cookies,
        )

    def blank_cookie(self) -> SessionCookie:
        """Cookie that overwrites the session cookie with an expired blank value."""
        return SessionCookie(
            name=self.cookie_name,
            value="",
            max_age=0,
            secure=self.secure_cookies,
        )
