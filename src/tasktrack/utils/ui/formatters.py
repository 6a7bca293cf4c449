"""Output formatters for CLI commands."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from rich.table import Table

from tasktrack.utils.ui.console import get_console


def format_timestamp(value: int | None) -> str:
    """Render epoch milliseconds as a UTC timestamp, or ``-`` when unset."""
    if value is None:
        return "-"
    return datetime.fromtimestamp(value / 1000, tz=UTC).strftime("%Y-%m-%d %H:%M:%S")


def format_table(
    rows: list[dict[str, Any]],
    columns: list[str],
    title: str | None = None,
) -> None:
    """Print ``rows`` as a table with the given column keys."""
    console = get_console()
    if not rows:
        console.print("[hint]No data to display[/hint]")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    for column in columns:
        table.add_column(column.replace("_", " ").title())

    for row in rows:
        table.add_row(*(_cell(row.get(column)) for column in columns))

    console.print(table)


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console().print(f"[error]Error:[/error] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    get_console().print(f"[success]Success:[/success] {message}")
