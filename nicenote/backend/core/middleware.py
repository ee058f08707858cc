"""
Per-request context for the notes API.

Each request gets a correlation id (X-Request-ID, generated when the
caller sends none) and a frontend tag taken from X-Frontend-ID. Both are
stored on request.state and bound into structlog contextvars for the
duration of the request; the response echoes the id and reports its
handling time in X-Response-Time.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from nicenote.backend.core.logging import get_logger

logger = get_logger(__name__)

# Subset of logging.VALID_SOURCES a caller may claim.
KNOWN_FRONTENDS = {"web", "cli", "client", "api", "internal"}


def _frontend(request: Request) -> str:
    claimed = request.headers.get("X-Frontend-ID", "").lower()
    return claimed if claimed in KNOWN_FRONTENDS else "unknown"


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        frontend = _frontend(request)
        request.state.request_id = request_id
        request.state.frontend = frontend

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )
        started = time.perf_counter()
        logger.debug(
            "Request started",
            extra={"client_host": request.client.host if request.client else None},
        )

        try:
            response = await call_next(request)
            duration_ms = _elapsed_ms(started)
            logger.debug(
                "Request completed",
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
        except Exception as exc:
            logger.error(
                "Request raised",
                extra={"duration_ms": _elapsed_ms(started), "error_type": type(exc).__name__},
            )
            raise
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        return response
