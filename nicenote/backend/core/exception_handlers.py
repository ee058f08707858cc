"""
Error responses for the notes API.

Every failure leaves the server as {"error": "<message>"}, where the
message is looked up from the exception code in the caller's
Accept-Language (see i18n.py). Exception text and details are logged,
never returned.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nicenote.backend.core.exceptions import (
    ApplicationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from nicenote.backend.core.i18n import resolve_locale, translate
from nicenote.backend.core.logging import get_logger
from nicenote.backend.schemas.base import ErrorResponse

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    ConflictError: 409,
    DatabaseError: 503,
}


def _get_request_id(request: Request) -> str | None:
    """RequestContextMiddleware stores the id on request.state; fall back to the header."""
    request_id = getattr(request.state, "request_id", None)
    if request_id is not None:
        return request_id
    return request.headers.get("x-request-id")


def _request_fields(request: Request, **fields: Any) -> dict[str, Any]:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": _get_request_id(request),
        **fields,
    }


def _error_response(request: Request, status_code: int, code: str) -> JSONResponse:
    locale = resolve_locale(request.headers.get("accept-language"))
    body = ErrorResponse(error=translate(code, locale))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
    fields = _request_fields(request, code=exc.code, message=exc.message, status=status_code)
    if isinstance(exc, ValidationError) and exc.details:
        fields["details"] = exc.details

    if status_code >= 500:
        logger.error("Server error", extra=fields)
    else:
        logger.warning("Client error", extra=fields)
    return _error_response(request, status_code, exc.code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Body and query validation failures.

    Over-long titles, unknown body fields and out-of-range `limit` values
    are rejected here before any service code runs.
    """
    errors = exc.errors()
    logger.warning(
        "Request validation failed",
        extra=_request_fields(
            request,
            error_count=len(errors),
            fields=[".".join(str(part) for part in err.get("loc", ())) for err in errors],
        ),
    )
    return _error_response(request, 422, "VAL_REQUEST_INVALID")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        extra=_request_fields(request, exception_type=type(exc).__name__),
    )
    return _error_response(request, 500, "SYS_INTERNAL_ERROR")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    logger.debug("Exception handlers registered")
