"""Common plumbing for the SQLite repositories.

``sqlite3`` calls block, so every repository method runs its statements on a
worker thread. One connection is shared by all repositories of an
application, and a per-connection lock keeps their statements and commits
from interleaving.
"""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Callable
from typing import Any, TypeVar

import anyio

T = TypeVar("T")

_locks: dict[int, threading.RLock] = {}
_locks_guard = threading.Lock()


def connection_lock(connection: sqlite3.Connection) -> threading.RLock:
    """Return the lock serialising work on ``connection``."""
    with _locks_guard:
        lock = _locks.get(id(connection))
        if lock is None:
            lock = _locks[id(connection)] = threading.RLock()
        return lock


class SqliteRepository:
    """Base class holding the shared connection and its lock."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection
        self.lock = connection_lock(connection)

    def _locked(self, func: Callable[..., T], *args: Any) -> T:
        with self.lock:
            return func(*args)

    async def run(self, func: Callable[..., T], *args: Any) -> T:
        """Run ``func(*args)`` on a worker thread while holding the lock."""
        return await anyio.to_thread.run_sync(self._locked, func, *args)
