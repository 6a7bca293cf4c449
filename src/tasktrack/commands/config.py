"""Configuration management commands."""

import math
from typing import Any, Optional

import typer
from pydantic import ValidationError

from tasktrack.commands.decorators import AppError, command_wrapper
from tasktrack.config import get_config_manager
from tasktrack.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from tasktrack.utils.typer_helpers import SuggestingGroup
from tasktrack.utils.ui.console import get_console
from tasktrack.utils.ui.formatters import format_success

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")


def parse_value(value: str) -> Any:
    """Interpret a command-line value as a bool, int or float where it looks like one."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.lower() in ("null", "none"):
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        return value
    return number if math.isfinite(number) else value


def _require_key(manager, key: str) -> None:
    if not manager.has_key(key):
        raise AppError(f"Unknown configuration key '{key}'", ERROR_NOT_FOUND)


@app.command("view")
@command_wrapper
def view_config(
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """View the current configuration, environment overrides included."""
    get_console().print_json(data=get_config_manager(profile).config.model_dump())


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., server.port)"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Get a configuration value."""
    manager = get_config_manager(profile)
    _require_key(manager, key)
    get_console().print(manager.get(key))


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., server.port)"),
    value: str = typer.Argument(..., help="Configuration value"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Set a configuration value and save the profile."""
    manager = get_config_manager(profile)
    _require_key(manager, key)

    parsed = parse_value(value)
    try:
        manager.set(key, parsed)
    except ValidationError as e:
        raise AppError(
            f"Invalid value for '{key}': {e.errors()[0]['msg']}", ERROR_INVALID_ARGS
        ) from e
    format_success(f"Configuration '{key}' set to '{parsed}'")


@app.command("reset")
@command_wrapper
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Configuration key to reset"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    manager = get_config_manager(profile)
    if key:
        _require_key(manager, key)

    if not yes:
        target = f"'{key}'" if key else "the entire configuration"
        if not typer.confirm(f"Reset {target}?"):
            raise typer.Exit(0)

    manager.reset(key)
    if key:
        format_success(f"Configuration '{key}' reset to default")
    else:
        format_success("Configuration reset to defaults")
