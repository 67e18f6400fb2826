"""Configuration CLI commands."""

import json

import typer
from pydantic import ValidationError

from toodo.config import Settings, get_config_dir, load_settings, save_settings
from toodo.interfaces.cli.common import print_error, print_success

app = typer.Typer(help="Configuration commands")


@app.command("show")
def show() -> None:
    """Print the effective settings as JSON."""
    settings = load_settings()
    data = settings.model_dump()
    data["database_url"] = settings.resolved_database_url()
    typer.echo(json.dumps(data, indent=2))


@app.command("path")
def path() -> None:
    typer.echo(str(get_config_dir() / "config.json"))


@app.command("set")
def set_value(key: str, value: str) -> None:
    """Set one setting, e.g. `toodo config set due_soon_days 3`.

    Values are parsed as JSON when possible, so numbers and lists work.
    """
    if key not in Settings.model_fields:
        print_error(f"Unknown setting: {key}")
        raise typer.Exit(1)

    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value

    current = load_settings(apply_env=False).model_dump()
    current[key] = parsed
    try:
        settings = Settings(**current)
    except ValidationError as e:
        print_error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
        raise typer.Exit(1)

    config_file = save_settings(settings)
    print_success(f"Saved {key} to {config_file}")
