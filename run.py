#!/usr/bin/env python3
"""
NiceNote entry script.

Operational tasks for the notes API: serve it, verify the install, dump
the merged YAML configuration, or run the test suite. Note editing lives
in cli.py.

Usage:
    python run.py --help
    python run.py --action server --reload --verbose
    python run.py --action health
    python run.py --action test --test-type unit
"""

import os
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

import click

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from nicenote.backend.core.logging import get_logger, setup_logging  # noqa: E402

ACTIONS = {
    "server": "Start the development server",
    "health": "Check application health",
    "config": "Display configuration",
    "test": "Run test suite",
    "info": "Show this information",
}

TEST_TARGETS = {"unit": "tests/unit", "integration": "tests/integration", "all": "tests/"}


def validate_project_root() -> Path:
    if not (PROJECT_ROOT / ".project_root").exists():
        click.secho("Error: .project_root not found. Run from project root.", fg="red", err=True)
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option("--action", type=click.Choice(list(ACTIONS)), default="info", help="Action to perform.")
@click.option("--verbose", "-v", is_flag=True, help="Log at INFO level.")
@click.option("--debug", "-d", is_flag=True, help="Log at DEBUG level.")
@click.option("--host", default=None, help="Bind address (server action).")
@click.option("--port", default=None, type=int, help="Bind port (server action).")
@click.option("--reload", is_flag=True, help="Restart on code changes (server action).")
@click.option(
    "--test-type",
    type=click.Choice(list(TEST_TARGETS)),
    default="all",
    help="Which tests to run (test action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    test_type: str,
) -> None:
    """
    NiceNote API Entry Point.

    \b
    Examples:
        python run.py --action server --reload --verbose
        python run.py --action health --debug
        python run.py --action config
        python run.py --action test --test-type unit
    """
    # Config lookup walks up from the working directory.
    os.chdir(validate_project_root())

    log_level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)
    logger.debug("run.py started", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "health":
        check_health(logger)
    elif action == "config":
        show_config(logger)
    elif action == "test":
        run_tests(logger, test_type)
    else:
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    from nicenote.backend.core.config import get_app_config

    try:
        server = get_app_config().application.server
    except (FileNotFoundError, ValueError) as e:
        logger.error("Configuration could not be loaded", extra={"error": str(e)})
        click.secho("Error: Could not load config/settings/application.yaml.", fg="red", err=True)
        sys.exit(1)

    bind_host = host or server.host
    bind_port = port or server.port
    cmd = [
        sys.executable, "-m", "uvicorn", "nicenote.backend.main:app",
        "--host", bind_host,
        "--port", str(bind_port),
    ]
    if reload:
        cmd.append("--reload")

    logger.info("Starting uvicorn", extra={"host": bind_host, "port": bind_port, "reload": reload})
    click.echo(f"Serving notes API at http://{bind_host}:{bind_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("uvicorn exited with an error", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


# -----------------------------------------------------------------------------
# Health checks: each returns a detail string or raises.
# -----------------------------------------------------------------------------


def _check_yaml() -> str:
    from nicenote.backend.core.config import get_app_config

    return f"App: {get_app_config().application.name}"


def _check_database_url() -> str:
    from sqlalchemy.engine import make_url

    from nicenote.backend.core import config

    return f"Backend: {make_url(config.get_database_url()).get_backend_name()}"


def _check_app() -> str:
    from nicenote.backend.main import get_app

    return f"Title: {get_app().title}"


def _check_client_settings() -> str:
    from nicenote.backend.core.config import get_app_config

    autosave = get_app_config().client.autosave
    if len(autosave.retry_delays_ms) < autosave.max_retries - 1:
        raise ValueError(
            f"{autosave.max_retries} attempts need {autosave.max_retries - 1} retry delays, "
            f"got {len(autosave.retry_delays_ms)}"
        )
    page_size = get_app_config().client.list.page_size
    return f"Debounce: {autosave.debounce_ms}ms, page size: {page_size}"


HEALTH_CHECKS: list[tuple[str, Callable[[], str]]] = [
    ("YAML configuration", _check_yaml),
    ("Database URL", _check_database_url),
    ("FastAPI application", _check_app),
    ("Client settings", _check_client_settings),
]


def check_health(logger) -> None:
    click.echo("Checking application health...\n")
    click.echo("Health Check Results:")
    click.echo("-" * 50)

    failures = 0
    for name, check in HEALTH_CHECKS:
        try:
            detail = check()
        except Exception as e:
            failures += 1
            logger.error("Health check failed", extra={"check": name, "error": str(e)})
            click.echo(f"  {click.style('✗ FAIL', fg='red')}  {name} ({e})")
        else:
            logger.debug("Health check passed", extra={"check": name})
            click.echo(f"  {click.style('✓ PASS', fg='green')}  {name} ({detail})")

    click.echo("-" * 50)
    if failures:
        click.secho(f"\n{failures} check(s) failed. See details above.", fg="yellow")
        sys.exit(1)
    click.secho("\nAll checks passed!", fg="green")


def _echo_section(values: dict, indent: int = 2) -> None:
    pad = " " * indent
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{pad}{key}:")
            _echo_section(value, indent + 2)
        else:
            click.echo(f"{pad}{key}: {value}")


def show_config(logger) -> None:
    from nicenote.backend.core.config import get_app_config

    try:
        app_config = get_app_config()
    except (FileNotFoundError, ValueError) as e:
        logger.error("Configuration could not be loaded", extra={"error": str(e)})
        click.secho(f"Error loading configuration: {e}", fg="red")
        sys.exit(1)

    click.echo("Application Configuration:\n")
    sections = {
        "Application Settings": app_config.application,
        "Database Settings": app_config.database,
        "Logging Settings": app_config.logging,
        "Client Settings": app_config.client,
    }
    for title, section in sections.items():
        click.echo(f"{title} (from YAML):")
        click.echo("-" * 40)
        _echo_section(section.model_dump())
        click.echo()


def run_tests(logger, test_type: str) -> None:
    cmd = [sys.executable, "-m", "pytest", TEST_TARGETS[test_type], "-v"]
    logger.info("Running tests", extra={"test_type": test_type})
    click.echo(f"Running: {' '.join(cmd)}\n")

    try:
        result = subprocess.run(cmd)
    except FileNotFoundError:
        logger.error("pytest not found. Install with: pip install -e '.[test]'")
        sys.exit(1)
    sys.exit(result.returncode)


def show_info(logger) -> None:
    from nicenote.backend.core.config import get_app_config

    click.echo("NiceNote")
    click.echo("=" * 40)
    try:
        application = get_app_config().application
    except (FileNotFoundError, ValueError) as e:
        logger.warning("Configuration could not be loaded", extra={"error": str(e)})
        click.echo("Name: NiceNote API")
    else:
        click.echo(f"Name: {application.name}")
        click.echo(f"Version: {application.version}")
        click.echo(f"Description: {application.description}")

    click.echo("\nAvailable Actions:")
    for name, description in ACTIONS.items():
        click.echo(f"  --action {name:<8} {description}")
    click.echo("\nLogging Options:")
    click.echo("  --verbose, -v     Enable INFO level logging")
    click.echo("  --debug, -d       Enable DEBUG level logging")
    click.echo("\nExamples:")
    click.echo("  python run.py --action server --reload --verbose")
    click.echo("  python cli.py notes list")
    click.echo("  python cli.py notes edit <id> --title 'Groceries'")


if __name__ == "__main__":
    main()
