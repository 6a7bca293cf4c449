"""Account administration commands."""

import typer

from tasktrack.commands.decorators import AppError, command_wrapper
from tasktrack.commands.store import open_store
from tasktrack.errors import NotFoundError
from tasktrack.utils.exit_codes import ERROR_NOT_FOUND
from tasktrack.utils.typer_helpers import SuggestingGroup
from tasktrack.utils.ui.formatters import format_success, format_table, format_timestamp

app = typer.Typer(cls=SuggestingGroup, help="Account administration commands")


@app.command("list")
@command_wrapper
async def list_users() -> None:
    """List every registered account."""
    with open_store() as store:
        users = await store.auth_service().list_users()

    rows = [
        {
            "email": user.email,
            "id": user.id,
            "name": " ".join(filter(None, [user.first_name, user.last_name])) or None,
            "active": user.is_active,
            "verified": user.email_verified,
            "created": format_timestamp(user.created_at),
        }
        for user in users
    ]
    format_table(rows, ["email", "id", "name", "active", "verified", "created"], title="Users")


async def _set_active(email: str, active: bool) -> None:
    with open_store() as store:
        try:
            await store.auth_service().set_active(email, active)
        except NotFoundError as e:
            raise AppError(e.message, ERROR_NOT_FOUND) from e


@app.command("deactivate")
@command_wrapper
async def deactivate_user(
    email: str = typer.Argument(..., help="Email of the account to deactivate"),
) -> None:
    """Deactivate an account and revoke its sessions."""
    await _set_active(email, False)
    format_success(f"Deactivated {email}")


@app.command("activate")
@command_wrapper
async def activate_user(
    email: str = typer.Argument(..., help="Email of the account to reactivate"),
) -> None:
    """Reactivate a deactivated account."""
    await _set_active(email, True)
    format_success(f"Activated {email}")
