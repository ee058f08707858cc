#!/usr/bin/env python3
"""
NiceNote CLI.

Command-line client for the Notes API.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    python cli.py --help                         # Show help

    # Notes (requires running server)
    python cli.py notes list                     # First page of notes
    python cli.py notes list --all               # Every page
    python cli.py notes show <id>                # Render one note
    python cli.py notes new -t "Title" -c "..."  # Create a note
    python cli.py notes edit <id> -c "..."       # Update a note
    python cli.py notes rm <id>                  # Delete a note

    # Database migrations
    python cli.py db current                     # Show current revision
    python cli.py db upgrade                     # Upgrade to latest

    # Health checks
    python cli.py health status                  # Backend readiness
    python cli.py health ping                    # Ping backend

Options:
    --verbose, -v     Enable verbose output
    --debug           Enable debug mode (detailed logging)
    --help            Show help message
"""

import sys
from pathlib import Path

import structlog
import typer
from rich.console import Console

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from nicenote.cli.commands import db_app, health_app, notes_app  # noqa: E402

# Create main app
app = typer.Typer(
    name="cli",
    help="NiceNote CLI - Notes, database migrations and health checks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register command groups
app.add_typer(notes_app, name="notes")
app.add_typer(db_app, name="db")
app.add_typer(health_app, name="health")


def _validate_project_root() -> None:
    """Validate that we're running from the project root."""
    if not (project_root / ".project_root").exists():
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    NiceNote CLI.

    Create, list, edit and delete notes; run migrations; check the backend.
    """
    _validate_project_root()

    # Configure logging based on flags
    if debug:
        from nicenote.backend.core.logging import setup_logging
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        from nicenote.backend.core.logging import setup_logging
        setup_logging(level="INFO", format_type="console")

    structlog.contextvars.bind_contextvars(source="cli")


if __name__ == "__main__":
    app()
