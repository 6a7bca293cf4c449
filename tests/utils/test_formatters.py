"""Tests for the console theme and output formatters."""

from __future__ import annotations

from io import StringIO
from unittest.mock import patch

from rich.console import Console

from tasktrack.utils.ui.console import THEME, get_console
from tasktrack.utils.ui.formatters import format_error, format_table, format_timestamp


def _capture() -> tuple[Console, StringIO]:
    buffer = StringIO()
    return Console(file=buffer, theme=THEME, width=200), buffer


def test_console_is_shared():
    assert get_console() is get_console()


def test_error_uses_theme_style():
    console, buffer = _capture()

    with patch("tasktrack.utils.ui.formatters.get_console", return_value=console):
        format_error("database is locked")

    assert buffer.getvalue().strip() == "Error: database is locked"


def test_table_renders_rows_with_titled_headers():
    console, buffer = _capture()

    with patch("tasktrack.utils.ui.formatters.get_console", return_value=console):
        format_table(
            [{"email": "a@example.com", "is_active": True, "last_login": None}],
            ["email", "is_active", "last_login"],
        )

    output = buffer.getvalue()
    assert "a@example.com" in output
    assert "yes" in output
    assert "Last Login" in output


def test_empty_table_prints_hint():
    console, buffer = _capture()

    with patch("tasktrack.utils.ui.formatters.get_console", return_value=console):
        format_table([], ["email"])

    assert "No data to display" in buffer.getvalue()


def test_format_timestamp():
    assert format_timestamp(None) == "-"
    assert format_timestamp(0) == "1970-01-01 00:00:00"
