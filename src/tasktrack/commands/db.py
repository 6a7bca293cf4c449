"""Database maintenance commands."""

import typer

from tasktrack.adapters.sqlite.migrations import current_version, migration_history
from tasktrack.commands.decorators import command_wrapper
from tasktrack.commands.store import open_store
from tasktrack.utils.typer_helpers import SuggestingGroup
from tasktrack.utils.ui.console import get_console
from tasktrack.utils.ui.formatters import format_success, format_table, format_timestamp

app = typer.Typer(cls=SuggestingGroup, help="Database maintenance commands")


@app.command("init")
@command_wrapper
def init_database() -> None:
    """Create the database and apply pending migrations."""
    with open_store() as store:
        version = current_version(store.connection)
        format_success(f"Database ready at {store.path} (schema version {version})")


@app.command("status")
@command_wrapper
def database_status() -> None:
    """Show the database location and applied migrations."""
    console = get_console()
    with open_store() as store:
        console.print(f"[bold]Database:[/bold] {store.path}")
        console.print(f"[bold]Schema version:[/bold] {current_version(store.connection)}")
        history = [
            {**entry, "applied_at": format_timestamp(entry["applied_at"])}
            for entry in migration_history(store.connection)
        ]
        format_table(history, ["version", "description", "applied_at"], title="Migrations")
