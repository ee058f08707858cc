"""
Note Commands.

List, show, create, edit and delete notes through a NotesSession,
the same client stack an editor UI uses.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Optional

import httpx
import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from nicenote.client.api import NotesApiClient, NotesClientError, NotFoundApiError
from nicenote.client.autosave import SaveStatus
from nicenote.client.session import NotesSession

app = typer.Typer(help="Note commands")
console = Console()


def open_session() -> NotesSession:
    """Session wired to the configured server, identified as the CLI."""
    return NotesSession.from_config(api=NotesApiClient(frontend="cli"))


def _run(action: Callable[[NotesSession], Awaitable[Any]]) -> Any:
    """Run an async action against a fresh session and map transport errors to exit codes."""

    async def runner() -> Any:
        async with open_session() as session:
            return await action(session)

    try:
        return asyncio.run(runner())
    except NotFoundApiError:
        console.print("[red]Error: Note not found[/red]")
        raise typer.Exit(1)
    except NotesClientError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except httpx.TransportError:
        console.print("[red]Error: Cannot connect to backend[/red]")
        console.print("[dim]Is the server running? Start with: python run.py --action server[/dim]")
        raise typer.Exit(1)


def _print_toasts(session: NotesSession) -> bool:
    """Print pending toasts. Returns True if there were any."""
    toasts = session.notifications.toasts
    for toast in toasts:
        console.print(f"[yellow]{toast.message}[/yellow]")
    return bool(toasts)


@app.command("list")
def list_notes(
    all_pages: bool = typer.Option(False, "--all", "-a", help="Follow the cursor to the last page"),
) -> None:
    """
    List notes, most recently updated first.

    Examples:
        cli.py notes list
        cli.py notes list --all
    """

    async def action(session: NotesSession) -> None:
        await session.load_notes()
        while all_pages and session.has_more:
            await session.load_more()

        table = Table(title="Notes", show_header=True)
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Title")
        table.add_column("Summary", style="dim")
        table.add_column("Updated")

        for item in session.cache.list_entries():
            table.add_row(
                item.id,
                item.title,
                item.summary or "-",
                item.updated_at.strftime("%Y-%m-%d %H:%M"),
            )

        console.print(table)
        if session.has_more:
            console.print("[dim]More notes available. Use --all to list every page.[/dim]")

    _run(action)


@app.command()
def show(note_id: str = typer.Argument(..., help="Note ID")) -> None:
    """
    Show a note with its Markdown rendered.

    Examples:
        cli.py notes show 3f1c...
    """

    async def action(session: NotesSession) -> None:
        note = await session.open_note(note_id)
        console.print(Panel(
            Markdown(note.content or ""),
            title=note.title,
            subtitle=f"updated {note.updated_at.isoformat()}",
        ))

    _run(action)


@app.command()
def new(
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Note title"),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="Markdown content"),
) -> None:
    """
    Create a note.

    Examples:
        cli.py notes new
        cli.py notes new -t "Groceries" -c "- milk"
    """

    async def action(session: NotesSession) -> None:
        note = await session.create_note()
        if note is None:
            _print_toasts(session)
            raise typer.Exit(1)

        if title is not None or content is not None:
            session.edit(note.id, title=title, content=content)
            await session.autosave.flush(note.id)

        failed = _print_toasts(session)
        console.print(f"[green]Created note {note.id}[/green]")
        if failed:
            raise typer.Exit(1)

    _run(action)


@app.command()
def edit(
    note_id: str = typer.Argument(..., help="Note ID"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="New Markdown content"),
) -> None:
    """
    Update a note's title and/or content.

    Examples:
        cli.py notes edit 3f1c... -t "Renamed"
    """
    if title is None and content is None:
        console.print("[red]Error: Provide --title and/or --content[/red]")
        raise typer.Exit(1)

    async def action(session: NotesSession) -> None:
        await session.open_note(note_id)
        session.edit(note_id, title=title, content=content)
        await session.autosave.flush(note_id)

        if session.autosave.status_of(note_id) is SaveStatus.UNSAVED:
            _print_toasts(session)
            raise typer.Exit(1)
        console.print(f"[green]Saved note {note_id}[/green]")

    _run(action)


@app.command()
def rm(note_id: str = typer.Argument(..., help="Note ID")) -> None:
    """
    Delete a note.

    Examples:
        cli.py notes rm 3f1c...
    """

    async def action(session: NotesSession) -> None:
        if not await session.delete_note(note_id):
            _print_toasts(session)
            raise typer.Exit(1)
        console.print(f"[green]Deleted note {note_id}[/green]")

    _run(action)
