"""
NiceNote configuration.

Typed settings come from config/settings/*.yaml, one schema per file
(config_schema.py). A small set of deployment overrides is read from
config/.env or NICENOTE_* environment variables:

    NICENOTE_DATABASE_URL   replaces database.yaml url
    NICENOTE_SERVER_URL     base URL the CLI and client talk to

Files:
    application.yaml   server bind, api prefix, cors, timeouts
    database.yaml      SQLAlchemy URL and engine options
    logging.yaml       level, format, handlers
    client.yaml        autosave, toast duration, list page size
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

from nicenote.backend.core.config_schema import (
    ApplicationSchema,
    ClientSchema,
    DatabaseSchema,
    LoggingSchema,
)


def find_project_root() -> Path:
    """Walk up from the working directory to the first .project_root marker."""
    for candidate in (Path.cwd(), *Path.cwd().parents):
        if (candidate / ".project_root").exists():
            return candidate
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Environment overrides loaded from config/.env or NICENOTE_* variables."""

    database_url: str | None = None
    server_url: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="NICENOTE_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    try:
        return schema_cls(**load_yaml_config(filename))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class AppConfig:
    """All four YAML files, each validated on construction. Bad files raise ValueError."""

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._client = _load_validated(ClientSchema, "client.yaml")

    @property
    def application(self) -> ApplicationSchema:
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        return self._logging

    @property
    def client(self) -> ClientSchema:
        """Editor client settings (autosave, notifications, paging)."""
        return self._client


@lru_cache
def get_settings() -> Settings:
    """Get cached overrides instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    if env_path.exists():
        return Settings(_env_file=str(env_path))
    return Settings()


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_database_url() -> str:
    """
    Resolve the database URL.

    NICENOTE_DATABASE_URL wins over database.yaml. Relative SQLite paths are
    anchored at the project root so the database does not move with the
    working directory.

    Returns:
        Database connection URL string.
    """
    raw_url = get_settings().database_url or get_app_config().database.url
    url = make_url(raw_url)

    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        db_path = Path(url.database)
        if not db_path.is_absolute():
            db_path = find_project_root() / db_path
            db_path.parent.mkdir(parents=True, exist_ok=True)
            url = url.set(database=str(db_path))

    return url.render_as_string(hide_password=False)


def get_server_base_url() -> tuple[str, float]:
    """
    Get the backend server base URL and timeout from application.yaml.

    NICENOTE_SERVER_URL replaces the URL built from host, port and prefix.

    Returns:
        Tuple of (base_url, timeout_seconds).
    """
    app = get_app_config().application
    server = app.server
    base_url = get_settings().server_url or f"http://{server.host}:{server.port}{app.api_prefix}"
    timeout = float(app.timeouts.external_api)
    return base_url, timeout
