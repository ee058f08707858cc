"""
Health Check Endpoints.

Provides the service banner plus liveness and readiness checks.

Endpoints:
- /: Service banner
- /health: Liveness check (process running)
- /health/ready: Readiness check (database reachable)
"""

import asyncio
import time
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nicenote.backend.core.config import get_app_config
from nicenote.backend.core.dependencies import DbSession
from nicenote.backend.core.logging import get_logger
from nicenote.backend.core.utils import to_iso, utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database(session: AsyncSession) -> dict[str, Any]:
    """
    Check database connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    try:
        start = time.perf_counter()
        await session.execute(text("SELECT 1"))
        latency_ms = int((time.perf_counter() - start) * 1000)

        return {
            "status": "healthy",
            "latency_ms": latency_ms,
        }

    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {
            "status": "unhealthy",
            "error": str(e),
        }


@router.get("/")
async def root() -> dict[str, str]:
    """Service banner."""
    return {
        "status": "ok",
        "message": f"{get_app_config().application.name} is running",
    }


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running.
    No dependency checks - this endpoint should always respond quickly.
    """
    return {"status": "healthy"}


@router.get("/health/ready", response_model=None)
async def readiness_check(db: DbSession) -> dict[str, Any] | JSONResponse:
    """
    Readiness check.

    Returns 200 if ready to serve traffic, 503 if the database is
    unreachable or does not answer within the configured timeout.
    """
    timeout = get_app_config().application.timeouts.database

    try:
        async with asyncio.timeout(timeout):
            db_result = await check_database(db)
    except TimeoutError:
        db_result = {"status": "unhealthy", "error": f"timed out after {timeout}s"}

    checks = {"database": db_result}
    body = {
        "status": db_result["status"],
        "checks": checks,
        "timestamp": to_iso(utc_now()),
    }

    if db_result["status"] == "unhealthy":
        logger.warning("Readiness check failed", extra={"checks": checks})
        return JSONResponse(status_code=503, content=body)

    return body
