"""
NiceNote.

- backend/: REST API, database, configuration
- client/: Editor client library (cache, autosave, notifications)
- cli/: Command line front end (Typer + Rich)
"""
