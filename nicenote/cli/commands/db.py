"""
Schema migration commands.

Thin wrappers around alembic, always pointed at the notes migrations
shipped with the backend. The database URL comes from the same settings
the server uses (see migrations/env.py).
"""

import subprocess
import sys
from pathlib import Path

import typer
from rich.console import Console

app = typer.Typer(help="Notes database migrations")
console = Console()

PROJECT_ROOT = Path(__file__).resolve().parents[3]
ALEMBIC_INI = PROJECT_ROOT / "nicenote" / "backend" / "migrations" / "alembic.ini"


def _alembic(heading: str, *args: str, done: str | None = None) -> None:
    """Run `alembic -c <ini> args...`, exiting with alembic's status on failure."""
    if not ALEMBIC_INI.exists():
        console.print(f"[red]Error: {ALEMBIC_INI.relative_to(PROJECT_ROOT)} not found[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]{heading}[/bold]\n")
    cmd = [sys.executable, "-m", "alembic", "-c", str(ALEMBIC_INI), *args]
    try:
        result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    except FileNotFoundError:
        console.print("[red]Error: alembic not found. Install with: pip install -e .[/red]")
        raise typer.Exit(1)
    if result.returncode != 0:
        raise typer.Exit(result.returncode)
    if done:
        console.print(f"\n[green]{done}[/green]")


@app.command()
def upgrade(
    revision: str = typer.Option("head", "--revision", "-r", help="Target revision"),
) -> None:
    """
    Create or upgrade the notes table.

    Examples:
        cli.py db upgrade
        cli.py db upgrade -r 0001
    """
    _alembic(f"Upgrading database to revision: {revision}", "upgrade", revision, done="Upgrade completed")


@app.command()
def downgrade(
    revision: str = typer.Option(..., "--revision", "-r", help="Target revision"),
) -> None:
    """
    Step the schema back. `-r base` drops the notes table.

    Examples:
        cli.py db downgrade -r -1
        cli.py db downgrade -r base
    """
    _alembic(f"Downgrading database to revision: {revision}", "downgrade", revision, done="Downgrade completed")


@app.command()
def current() -> None:
    """Show the revision the database is at."""
    _alembic("Current database revision:", "current")


@app.command()
def history() -> None:
    """List known migrations."""
    _alembic("Migration history:", "history", "--verbose")


@app.command()
def generate(
    message: str = typer.Option(..., "--message", "-m", help="Migration message"),
) -> None:
    """Autogenerate a migration from changes to the Note model."""
    _alembic(
        f"Generating migration: {message}",
        "revision", "--autogenerate", "-m", message,
        done="Migration generated",
    )
