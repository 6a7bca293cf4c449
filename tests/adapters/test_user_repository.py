"""Unit tests for SqliteUserRepository."""

from __future__ import annotations

import sqlite3
from unittest.mock import MagicMock

import pytest

from tasktrack.adapters.sqlite.user_repository import SqliteUserRepository
from tasktrack.errors import EmailExistsError
from tasktrack.models import User

NOW = 1_700_000_000_000


def _user(user_id="u1", email="alice@example.com", **fields) -> User:
    return User(
        id=user_id,
        email=email,
        password_hash="hash",
        created_at=NOW,
        updated_at=NOW,
        **fields,
    )


class TestAddAndGet:
    @pytest.mark.asyncio
    async def test_add_round_trips_fields(self, user_repository):
        created = await user_repository.add(_user(first_name="Alice"))

        assert created.id == "u1"
        assert created.first_name == "Alice"
        assert created.is_active is True
        assert created.email_verified is False

    @pytest.mark.asyncio
    async def test_get_by_email_is_case_sensitive(self, user_repository):
        await user_repository.add(_user())

        assert await user_repository.get_by_email("alice@example.com") is not None
        assert await user_repository.get_by_email("Alice@example.com") is None

    @pytest.mark.asyncio
    async def test_get_missing(self, user_repository):
        assert await user_repository.get("nope") is None


class TestEmailUniqueness:
    @pytest.mark.asyncio
    async def test_duplicate_insert_maps_to_email_exists(self, user_repository):
        await user_repository.add(_user("u1"))

        with pytest.raises(EmailExistsError):
            await user_repository.add(_user("u2"))

    @pytest.mark.asyncio
    async def test_connection_usable_after_conflict(self, user_repository):
        await user_repository.add(_user("u1"))
        with pytest.raises(EmailExistsError):
            await user_repository.add(_user("u2"))

        created = await user_repository.add(_user("u3", "bob@example.com"))
        assert created.email == "bob@example.com"

    @pytest.mark.asyncio
    async def test_update_to_taken_email(self, user_repository):
        await user_repository.add(_user("u1", "alice@example.com"))
        await user_repository.add(_user("u2", "bob@example.com"))

        with pytest.raises(EmailExistsError):
            await user_repository.update("u2", {"email": "alice@example.com"})

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(self):
        connection = MagicMock()
        connection.execute.side_effect = sqlite3.IntegrityError(
            "NOT NULL constraint failed: users.password_hash"
        )
        repo = SqliteUserRepository(connection)

        with pytest.raises(sqlite3.IntegrityError):
            await repo.add(_user())
        connection.rollback.assert_called_once()


class TestUpdate:
    @pytest.mark.asyncio
    async def test_flags_are_stored_as_booleans(self, user_repository):
        await user_repository.add(_user())

        updated = await user_repository.update(
            "u1", {"is_active": False, "email_verified": True, "updated_at": NOW + 5}
        )

        assert updated.is_active is False
        assert updated.email_verified is True
        assert updated.updated_at == NOW + 5

    @pytest.mark.asyncio
    async def test_empty_changes_returns_current(self, user_repository):
        await user_repository.add(_user())
        assert (await user_repository.update("u1", {})).email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_update_missing_user(self, user_repository):
        assert await user_repository.update("ghost", {"first_name": "x"}) is None


@pytest.mark.asyncio
async def test_list_all_orders_by_creation(user_repository):
    await user_repository.add(_user("u2", "zed@example.com"))
    await user_repository.add(_user("u1", "amy@example.com"))

    users = await user_repository.list_all()

    assert [u.email for u in users] == ["amy@example.com", "zed@example.com"]
