"""Migration 001: users, sessions, verification_tokens and tasks."""

from tasktrack.adapters.sqlite import schema

from .runner import Migration

initial_migration = Migration(
    version=1,
    description="Initial schema: users, sessions, verification_tokens, tasks",
    statements=(*schema.ALL_TABLES, *schema.ALL_INDEXES),
)
