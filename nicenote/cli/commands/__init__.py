"""
CLI Commands.

Organized by domain/feature area.
"""

from nicenote.cli.commands.db import app as db_app
from nicenote.cli.commands.health import app as health_app
from nicenote.cli.commands.notes import app as notes_app

__all__ = [
    "db_app",
    "health_app",
    "notes_app",
]
