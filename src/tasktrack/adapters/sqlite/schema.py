"""Database schema definitions for the tasktrack SQLite store.

Four tables: users, sessions, verification_tokens and tasks. Sessions, tokens
and tasks cascade-delete with their owning user. All timestamps are integer
milliseconds since the Unix epoch.
"""

from __future__ import annotations

# Users table - credentials and profile
CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    first_name TEXT,
    last_name TEXT,
    is_active INTEGER DEFAULT 1,
    email_verified INTEGER DEFAULT 0,
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL
)
"""

# Sessions table - one row per logged-in browser
CREATE_SESSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS sessions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    expires_at INTEGER NOT NULL,
    created_at INTEGER,
    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
)
"""

# Verification tokens (password reset / email verification, no operations yet)
CREATE_VERIFICATION_TOKENS_TABLE = """
CREATE TABLE IF NOT EXISTS verification_tokens (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    expires_at INTEGER NOT NULL,
    type TEXT NOT NULL,
    created_at INTEGER,
    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
)
"""

# Tasks table
CREATE_TASKS_TABLE = """
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT,
    status TEXT NOT NULL DEFAULT 'pending'
        CHECK (status IN ('pending', 'in_progress', 'completed')),
    priority TEXT NOT NULL DEFAULT 'medium'
        CHECK (priority IN ('low', 'medium', 'high')),
    due_date INTEGER,
    category TEXT,
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL,
    completed_at INTEGER,
    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
)
"""

CREATE_SESSION_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_sessions_user ON sessions(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_sessions_expires ON sessions(expires_at)",
]

CREATE_TASK_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_user ON tasks(user_id)",
    # Composite indexes for the common filtered listings
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_status ON tasks(user_id, status)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_created ON tasks(user_id, created_at)",
]

CREATE_TOKEN_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_verification_tokens_user ON verification_tokens(user_id)",
]

# All table creation statements in dependency order
ALL_TABLES = [
    CREATE_USERS_TABLE,
    CREATE_SESSIONS_TABLE,
    CREATE_VERIFICATION_TOKENS_TABLE,
    CREATE_TASKS_TABLE,
]

ALL_INDEXES = CREATE_SESSION_INDEXES + CREATE_TASK_INDEXES + CREATE_TOKEN_INDEXES

TABLE_NAMES = ("users", "sessions", "verification_tokens", "tasks")
