"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from nicenote.backend.core.database import get_db_session

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(request: Request) -> str | None:
    """
    Return the request ID assigned by RequestContextMiddleware.

    Used for request tracing and correlation.
    """
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id")


RequestId = Annotated[str | None, Depends(get_request_id)]
