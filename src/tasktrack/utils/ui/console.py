"""Shared Rich console for tasktrack commands."""

from functools import lru_cache

from rich.console import Console
from rich.theme import Theme

THEME = Theme(
    {
        "error": "bold red",
        "success": "bold green",
        "hint": "yellow",
        "muted": "dim",
    }
)


@lru_cache(maxsize=1)
def get_console() -> Console:
    """Console styled with the tasktrack theme; cached so output interleaves in order."""
    return Console(theme=THEME)
