"""
API Router.

Aggregates all endpoint routers.
"""

from fastapi import APIRouter

from nicenote.backend.api.routes import notes

router = APIRouter()

# Notes endpoints
router.include_router(notes.router, prefix="/notes", tags=["notes"])
