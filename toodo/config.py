"""Configuration storage for toodo.

Settings live in ~/.toodo/config.json (or $TOODO_HOME/config.json).
Environment variables override the file:

    TOODO_HOME          config directory
    TOODO_DATABASE_URL  SQLAlchemy database URL
    TOODO_LOG_LEVEL     logging level name
"""

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """User-editable settings."""

    database_url: str | None = Field(
        default=None, description="SQLAlchemy URL; defaults to a SQLite file in the config dir"
    )
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    dependency_tree_max_depth: int = Field(default=10, ge=0)
    due_soon_days: int = Field(default=2, ge=0)

    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{get_config_dir() / 'toodo.db'}"


def get_config_dir() -> Path:
    """Get the toodo config directory."""
    config_dir = Path(os.environ.get("TOODO_HOME") or Path.home() / ".toodo").expanduser()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def load_settings(apply_env: bool = True) -> Settings:
    """Load settings from disk, then apply environment overrides."""
    config_file = get_config_dir() / "config.json"
    settings = Settings()
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            settings = Settings(**data)
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"Ignoring invalid config file {config_file}: {e}")

    if not apply_env:
        return settings

    overrides = {}
    if os.environ.get("TOODO_DATABASE_URL"):
        overrides["database_url"] = os.environ["TOODO_DATABASE_URL"]
    if os.environ.get("TOODO_LOG_LEVEL"):
        overrides["log_level"] = os.environ["TOODO_LOG_LEVEL"]
    return settings.model_copy(update=overrides) if overrides else settings


def save_settings(settings: Settings) -> Path:
    """Save settings to the config file and return its path."""
    config_file = get_config_dir() / "config.json"
    config_file.write_text(
        json.dumps(settings.model_dump(), indent=2),
        encoding="utf-8",
    )
    return config_file


def configure_logging(level: str | int = "INFO") -> None:
    """Route log records through a rich handler on stderr."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )
