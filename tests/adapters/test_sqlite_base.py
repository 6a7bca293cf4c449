"""Tests for the shared SQLite repository plumbing."""

from __future__ import annotations

import asyncio
import threading

import pytest

from tasktrack.adapters.sqlite import get_connection
from tasktrack.adapters.sqlite.base import SqliteRepository, connection_lock
from tasktrack.adapters.sqlite.connection import MEMORY_DATABASE
from tasktrack.models import TaskCreate, TaskFilters

NOW = 1_700_000_000_000


def test_lock_is_shared_per_connection(connection, user_repository, task_repository):
    assert connection_lock(connection) is user_repository.lock
    assert task_repository.lock is user_repository.lock


def test_each_connection_has_its_own_lock(connection):
    other = get_connection(MEMORY_DATABASE)
    try:
        assert connection_lock(other) is not connection_lock(connection)
    finally:
        other.close()


@pytest.mark.asyncio
async def test_run_uses_worker_thread(connection):
    repo = SqliteRepository(connection)

    worker_thread = await repo.run(threading.get_ident)

    assert worker_thread != threading.get_ident()


@pytest.mark.asyncio
async def test_concurrent_writes_all_commit(task_repository, seed_user):
    owner = seed_user("owner", "owner@example.com")

    tasks = await asyncio.gather(
        *(task_repository.add(owner, TaskCreate(title=f"task {i}"), NOW) for i in range(20))
    )

    assert len({task.id for task in tasks}) == 20
    page = await task_repository.list_page(owner, TaskFilters())
    assert page.total == 20
