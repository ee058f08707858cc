"""
Shared plumbing for services.

A service owns one AsyncSession for the lifetime of a request, builds
its repositories on it, and routes every awaited repository call
through _execute_db_operation so that driver errors leave the service
layer as AppException subclasses.
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nicenote.backend.core.exceptions import ConflictError, DatabaseError
from nicenote.backend.core.logging import get_logger

T = TypeVar("T")

# Substrings SQLite and PostgreSQL use for duplicate-key violations.
_DUPLICATE_MARKERS = ("unique", "duplicate")


class BaseService:
    """Holds the request's session and a module logger tagged with the service name."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(type(self).__module__)

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def _execute_db_operation(self, operation: str, coro: Awaitable[T]) -> T:
        """
        Await a repository call, translating SQLAlchemy failures.

        Raises:
            ConflictError: duplicate primary or unique key
            DatabaseError: any other constraint or driver failure

        Application exceptions raised by the repository (NotFoundError)
        pass through untouched.
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning("Integrity error", extra=self._context(operation=operation, error=str(e)))
            message = str(e).lower()
            if any(marker in message for marker in _DUPLICATE_MARKERS):
                raise ConflictError("Resource already exists") from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error("Database failure", extra=self._context(operation=operation, error=str(e)))
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _context(self, **fields: Any) -> dict[str, Any]:
        return {"service": type(self).__name__, **fields}

    def _log_operation(self, operation: str, **context: Any) -> None:
        self._logger.info(operation, extra=self._context(**context))

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, extra=self._context(**context))
