"""Schema migrations for the SQLite store."""

from .m001_initial_schema import initial_migration
from .runner import Migration, apply_migrations, current_version, migration_history

ALL_MIGRATIONS: list[Migration] = [
    initial_migration,
]

__all__ = [
    "ALL_MIGRATIONS",
    "Migration",
    "apply_migrations",
    "current_version",
    "migration_history",
]
