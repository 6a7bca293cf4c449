"""Unit tests for schema migrations and the initial schema."""

from __future__ import annotations

import sqlite3

import pytest

from tasktrack.adapters.sqlite import schema
from tasktrack.adapters.sqlite.migrations import (
    ALL_MIGRATIONS,
    Migration,
    apply_migrations,
    current_version,
    migration_history,
)

CREATE_ONE = Migration(1, "Create test_table_one", ("CREATE TABLE test_table_one (id INTEGER)",))
BROKEN = Migration(
    2,
    "Broken migration",
    (
        "CREATE TABLE test_table_two (id INTEGER)",
        "CREATE TABLE test_table_one (id INTEGER)",
    ),
)


@pytest.fixture
def raw_connection():
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


def _tables(connection) -> set[str]:
    return {
        row[0] for row in connection.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    }


class TestApplyMigrations:
    def test_fresh_database_is_version_zero(self, raw_connection):
        assert current_version(raw_connection) == 0

    def test_applies_pending_once(self, raw_connection):
        assert apply_migrations(raw_connection, [CREATE_ONE]) == 1
        assert apply_migrations(raw_connection, [CREATE_ONE]) == 0
        assert current_version(raw_connection) == 1

    def test_applies_in_version_order(self, raw_connection):
        second = Migration(2, "Add column", ("ALTER TABLE test_table_one ADD COLUMN name TEXT",))

        assert apply_migrations(raw_connection, [second, CREATE_ONE]) == 2
        assert current_version(raw_connection) == 2

    def test_failed_migration_is_rolled_back(self, raw_connection):
        apply_migrations(raw_connection, [CREATE_ONE])

        with pytest.raises(RuntimeError, match="Migration 2 failed"):
            apply_migrations(raw_connection, [CREATE_ONE, BROKEN])

        assert current_version(raw_connection) == 1
        assert "test_table_two" not in _tables(raw_connection)

    def test_history(self, raw_connection):
        apply_migrations(raw_connection, [CREATE_ONE])

        history = migration_history(raw_connection)

        assert [h["version"] for h in history] == [1]
        assert history[0]["description"] == "Create test_table_one"
        assert isinstance(history[0]["applied_at"], int)


class TestInitialSchema:
    def test_all_tables_created(self, connection):
        assert set(schema.TABLE_NAMES) <= _tables(connection)

    def test_schema_version_matches_latest_migration(self, connection):
        latest = max(m.version for m in ALL_MIGRATIONS)
        assert current_version(connection) == latest

    def test_foreign_keys_enforced(self, connection):
        with pytest.raises(sqlite3.IntegrityError):
            connection.execute(
                "INSERT INTO tasks (user_id, title, created_at, updated_at) VALUES (?, ?, ?, ?)",
                ("missing-user", "orphan", 1, 1),
            )

    def test_status_check_constraint(self, connection, seed_user):
        seed_user()
        with pytest.raises(sqlite3.IntegrityError):
            connection.execute(
                "INSERT INTO tasks (user_id, title, status, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?)",
                ("user-1", "bad", "archived", 1, 1),
            )
