"""Main entry point for the tasktrack CLI."""

import typer
import uvicorn
from rich.console import Console

from tasktrack import __version__
from tasktrack.commands import config, db, sessions, users
from tasktrack.config import get_config_manager
from tasktrack.utils.typer_helpers import SuggestingGroup

app = typer.Typer(
    name="tasktrack",
    cls=SuggestingGroup,
    help="Personal task tracker: HTTP API server and operator commands",
    no_args_is_help=True,
)

console = Console()

app.add_typer(db.app, name="db", help="Database maintenance")
app.add_typer(users.app, name="users", help="Account administration")
app.add_typer(sessions.app, name="sessions", help="Session maintenance")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]tasktrack[/bold] version [cyan]{__version__}[/cyan]")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind"),
    port: int | None = typer.Option(None, "--port", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API server."""
    config = get_config_manager().config
    bind_host = host or config.server.host
    bind_port = port or config.server.port

    console.print(
        f"[bold]tasktrack[/bold] serving on [cyan]http://{bind_host}:{bind_port}[/cyan] "
        f"([dim]{config.environment}[/dim])"
    )
    uvicorn.run(
        "tasktrack.web.app:get_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=config.logging.level.lower(),
    )


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
