"""CLI interface for toodo using Typer.

Usage:
    toodo init                      # Create the database schema
    toodo serve                     # Run the HTTP API
    toodo todo add "Write docs"     # Create a todo
    toodo dep add B A               # B depends on A
    toodo dep tree B                # Show B's dependency tree

The CLI is structured as:
- app: Main Typer application
- commands/: Individual command groups (todo, dep, project, tag, period, config)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

import typer

from toodo import __version__
from toodo.config import configure_logging, load_settings
from toodo.infrastructure import Database

# Import command groups
from toodo.interfaces.cli.commands import config, dep, period, project, tag, todo
from toodo.interfaces.cli.common import print_success

# Create the main Typer application
app = typer.Typer(
    name="toodo",
    help="Todo management with dependencies and work-time tracking",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"toodo version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (or set TOODO_LOG_LEVEL)",
    ),
) -> None:
    """toodo - todos with dependencies and work-time tracking."""
    configure_logging(log_level or load_settings().log_level)


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(todo.app, name="todo")
app.add_typer(dep.app, name="dep")
app.add_typer(project.app, name="project")
app.add_typer(tag.app, name="tag")
app.add_typer(period.app, name="period")
app.add_typer(config.app, name="config")


# =============================================================================
# Top-Level Commands
# =============================================================================


@app.command("init")
def init() -> None:
    """Create the database schema if it does not exist yet."""
    settings = load_settings()
    database = Database(settings.resolved_database_url())
    try:
        database.create_all()
    finally:
        database.close()
    print_success(f"Database ready: {settings.resolved_database_url()}")


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default from config)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "toodo.interfaces.api.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


__all__ = ["app"]
