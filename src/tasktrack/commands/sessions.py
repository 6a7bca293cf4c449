"""Session maintenance commands."""

import typer

from tasktrack.commands.decorators import command_wrapper
from tasktrack.commands.store import open_store
from tasktrack.utils.typer_helpers import SuggestingGroup
from tasktrack.utils.ui.formatters import format_success

app = typer.Typer(cls=SuggestingGroup, help="Session maintenance commands")


@app.command("purge")
@command_wrapper
async def purge_sessions() -> None:
    """Delete expired sessions.

    Expired sessions are already rejected on use; this only reclaims storage.
    """
    with open_store() as store:
        removed = await store.session_service().delete_expired_sessions()
    format_success(f"Removed {removed} expired session(s)")
