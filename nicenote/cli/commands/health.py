"""
Backend health commands.

`status` renders /health/ready (database reachability and latency);
`ping` only checks that /health answers.
"""

import asyncio

import httpx
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from nicenote.client.api import NotesApiClient

app = typer.Typer(help="Backend health checks")
console = Console()


async def _get(path: str) -> httpx.Response:
    client = NotesApiClient(frontend="cli")
    try:
        return await client.request("GET", path)
    finally:
        await client.close()


def _colored(value: str) -> str:
    color = "green" if value == "healthy" else "red"
    return f"[{color}]{value}[/{color}]"


def _render_readiness(data: dict) -> None:
    overall = data.get("status", "unknown")
    color = "green" if overall == "healthy" else "red"
    console.print(Panel(f"[{color}]{overall.upper()}[/{color}]", title="Backend Status"))

    table = Table(title="Health Status", show_header=True)
    table.add_column("Component", style="cyan")
    table.add_column("Status")
    table.add_column("Details")
    for component, check in data.get("checks", {}).items():
        details = []
        if "latency_ms" in check:
            details.append(f"latency: {check['latency_ms']}ms")
        if "error" in check:
            details.append(f"error: {check['error']}")
        table.add_row(component, _colored(check.get("status", "unknown")), ", ".join(details) or "-")
    console.print(table)


@app.command()
def status() -> None:
    """Show database readiness as reported by the server."""
    try:
        response = asyncio.run(_get("/health/ready"))
    except httpx.TransportError:
        console.print("[red]Error: Cannot connect to backend[/red]")
        console.print("[dim]Is the server running? Start with: python run.py --action server[/dim]")
        raise typer.Exit(1)

    # 503 still carries the per-check breakdown.
    if response.status_code not in (200, 503):
        console.print(f"[red]Unexpected response: {response.status_code}[/red]")
        raise typer.Exit(1)
    _render_readiness(response.json())
    if response.status_code == 503:
        raise typer.Exit(1)


@app.command()
def ping() -> None:
    """Simple ping to check if backend is reachable."""
    try:
        response = asyncio.run(_get("/health"))
    except httpx.TransportError:
        console.print("[red]✗ Backend is not reachable[/red]")
        raise typer.Exit(1)

    if response.status_code == 200:
        console.print("[green]✓ Backend is reachable[/green]")
    else:
        console.print(f"[yellow]Backend responded with status {response.status_code}[/yellow]")
