"""Unit tests for AuthService."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from tasktrack.errors import (
    AccountDeactivatedError,
    EmailExistsError,
    InvalidCredentialsError,
    NotFoundError,
)
from tasktrack.models import LoginRequest, ProfileUpdate, RegisterRequest


def _register_request(email="alice@example.com", password="Password1", **extra):
    return RegisterRequest(email=email, password=password, **extra)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


class TestRegister:
    @pytest.mark.asyncio
    async def test_creates_user_and_session(
        self, auth_service, session_service, user_repository, clock
    ):
        user, cookie = await auth_service.register(
            _register_request(first_name="Alice", last_name="")
        )

        assert user.email == "alice@example.com"
        assert user.first_name == "Alice"
        assert user.last_name is None
        assert user.is_active is True
        assert user.email_verified is False
        assert user.created_at == clock.now

        resolved, _ = await session_service.validate_session(cookie.value)
        assert resolved.id == user.id

        stored = await user_repository.get(user.id)
        assert stored.password_hash.startswith("$2b$")

    @pytest.mark.asyncio
    async def test_public_user_has_no_hash(self, auth_service):
        user, _ = await auth_service.register(_register_request())
        assert "passwordHash" not in user.to_json()

    @pytest.mark.asyncio
    async def test_duplicate_email(self, auth_service):
        await auth_service.register(_register_request())

        with pytest.raises(EmailExistsError):
            await auth_service.register(_register_request())

    @pytest.mark.asyncio
    async def test_email_is_case_sensitive(self, auth_service):
        await auth_service.register(_register_request("alice@example.com"))
        user, _ = await auth_service.register(_register_request("Alice@example.com"))
        assert user.email == "Alice@example.com"

    @pytest.mark.asyncio
    async def test_race_past_precheck_still_conflicts(self, auth_service):
        await auth_service.register(_register_request())
        # Simulate a concurrent registration that passed the pre-check
        auth_service.users.get_by_email = AsyncMock(return_value=None)

        with pytest.raises(EmailExistsError):
            await auth_service.register(_register_request())


# ---------------------------------------------------------------------------
# Login and logout
# ---------------------------------------------------------------------------


class TestLogin:
    @pytest.mark.asyncio
    async def test_success(self, auth_service):
        registered, _ = await auth_service.register(_register_request())

        user, cookie = await auth_service.login(
            LoginRequest(email="alice@example.com", password="Password1")
        )

        assert user.id == registered.id
        assert cookie.value

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, auth_service):
        await auth_service.register(_register_request())

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await auth_service.login(LoginRequest(email="alice@example.com", password="nope"))
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            await auth_service.login(LoginRequest(email="bob@example.com", password="nope"))

        assert wrong_password.value.message == unknown_email.value.message

    @pytest.mark.asyncio
    async def test_deactivated_account(self, auth_service):
        await auth_service.register(_register_request())
        await auth_service.set_active("alice@example.com", False)

        with pytest.raises(AccountDeactivatedError):
            await auth_service.login(
                LoginRequest(email="alice@example.com", password="Password1")
            )


class TestLogout:
    @pytest.mark.asyncio
    async def test_revokes_session(self, auth_service, session_service):
        _, cookie = await auth_service.register(_register_request())

        blank = await auth_service.logout(cookie.value)

        assert blank.value == ""
        assert blank.max_age == 0
        assert await session_service.validate_session(cookie.value) == (None, None)

    @pytest.mark.asyncio
    async def test_without_session_still_returns_blank_cookie(self, auth_service):
        assert (await auth_service.logout(None)).max_age == 0
        assert (await auth_service.logout("unknown")).value == ""


# ---------------------------------------------------------------------------
# Profile and activation
# ---------------------------------------------------------------------------


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_names_only(self, auth_service, user_repository, clock):
        user, _ = await auth_service.register(_register_request(first_name="Alice"))
        await user_repository.update(user.id, {"email_verified": True})
        clock.advance(1000)

        updated = await auth_service.update_profile(
            user, ProfileUpdate(first_name="", last_name="Smith")
        )

        assert updated.first_name is None
        assert updated.last_name == "Smith"
        assert updated.email_verified is True
        assert updated.updated_at == clock.now

    @pytest.mark.asyncio
    async def test_email_change_clears_verification(self, auth_service, user_repository):
        user, _ = await auth_service.register(_register_request())
        await user_repository.update(user.id, {"email_verified": True})

        updated = await auth_service.update_profile(
            user, ProfileUpdate(email="alice.new@example.com")
        )

        assert updated.email == "alice.new@example.com"
        assert updated.email_verified is False

    @pytest.mark.asyncio
    async def test_same_email_keeps_verification(self, auth_service, user_repository):
        user, _ = await auth_service.register(_register_request())
        await user_repository.update(user.id, {"email_verified": True})

        updated = await auth_service.update_profile(
            user, ProfileUpdate(email="alice@example.com")
        )

        assert updated.email_verified is True

    @pytest.mark.asyncio
    async def test_email_taken_by_another_account(self, auth_service):
        await auth_service.register(_register_request("bob@example.com"))
        user, _ = await auth_service.register(_register_request())

        with pytest.raises(EmailExistsError):
            await auth_service.update_profile(user, ProfileUpdate(email="bob@example.com"))


class TestSetActive:
    @pytest.mark.asyncio
    async def test_deactivation_revokes_sessions(self, auth_service, session_service):
        _, cookie = await auth_service.register(_register_request())

        user = await auth_service.set_active("alice@example.com", False)

        assert user.is_active is False
        assert await session_service.validate_session(cookie.value) == (None, None)

    @pytest.mark.asyncio
    async def test_reactivation_allows_login(self, auth_service):
        await auth_service.register(_register_request())
        await auth_service.set_active("alice@example.com", False)
        await auth_service.set_active("alice@example.com", True)

        user, _ = await auth_service.login(
            LoginRequest(email="alice@example.com", password="Password1")
        )
        assert user.is_active is True

    @pytest.mark.asyncio
    async def test_unknown_email(self, auth_service):
        with pytest.raises(NotFoundError):
            await auth_service.set_active("ghost@example.com", False)


@pytest.mark.asyncio
async def test_list_users(auth_service):
    await auth_service.register(_register_request("a@example.com"))
    await auth_service.register(_register_request("b@example.com"))

    users = await auth_service.list_users()

    assert sorted(u.email for u in users) == ["a@example.com", "b@example.com"]
