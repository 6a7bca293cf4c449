"""Typer helper utilities."""

from difflib import get_close_matches

import click
import typer
from typer.core import TyperGroup

from tasktrack.utils.exit_codes import ERROR_INVALID_ARGS
from tasktrack.utils.ui.console import get_console


class SuggestingGroup(TyperGroup):
    """Command group that answers an unknown subcommand with "Did you mean" hints.

    Only visible commands are offered. Without a close match click's own
    usage error is raised unchanged.
    """

    def suggestions(self, ctx, attempted: str) -> list[str]:
        visible = [
            name for name in self.list_commands(ctx) if not self.commands[name].hidden
        ]
        return get_close_matches(attempted, visible, n=3, cutoff=0.6)

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            matches = self.suggestions(ctx, args[0]) if args else []
            if not matches:
                raise

            console = get_console()
            console.print(
                f'[error]Error:[/error] unknown command "{args[0]}" for "{ctx.info_name}"'
            )
            console.print()
            header = "Did you mean this?" if len(matches) == 1 else "Did you mean one of these?"
            console.print(f"[hint]{header}[/hint]")
            for match in matches:
                console.print(f"        {match}")
            raise typer.Exit(ERROR_INVALID_ARGS) from e
