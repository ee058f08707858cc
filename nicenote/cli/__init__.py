"""
CLI Client Module.

Command-line front end built with Typer and Rich.

Architecture:
- CLI is a thin presentation layer over nicenote.client.NotesSession
- All persistence lives in the backend; the CLI calls it via HTTP (httpx)
- Sends X-Frontend-ID: cli header for log routing

Usage:
    python cli.py --help
    python cli.py notes list
    python cli.py health status
"""
