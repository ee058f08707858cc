"""
Pagination Utilities.

Keyset (cursor) pagination for list endpoints. A cursor is the
(updated_at, id) pair of the last item on the previous page, so pages stay
stable while rows are inserted or deleted between fetches. Forward-only:
there is no previous-page cursor.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

from fastapi import Query

from nicenote.backend.core.utils import as_naive_utc

T = TypeVar("T")

DEFAULT_LIMIT = 50
MAX_LIMIT = 100


# =============================================================================
# Pagination Parameters
# =============================================================================


@dataclass
class KeysetParams:
    """
    Keyset pagination parameters extracted from the query string.

    cursor is normalized to naive UTC to match stored timestamps.
    """

    limit: int
    cursor: datetime | None = None
    cursor_id: str | None = None

    @property
    def is_first_page(self) -> bool:
        """Check if no cursor was supplied."""
        return self.cursor is None


def get_keyset_params(
    limit: int = Query(
        default=DEFAULT_LIMIT,
        ge=1,
        le=MAX_LIMIT,
        description="Maximum number of items to return",
    ),
    cursor: datetime | None = Query(
        default=None,
        description="updatedAt of the last item on the previous page (ISO-8601 with offset)",
    ),
    cursor_id: str | None = Query(
        default=None,
        alias="cursorId",
        min_length=1,
        description="id of the last item on the previous page",
    ),
) -> KeysetParams:
    """
    FastAPI dependency for keyset pagination parameters.

    Usage:
        @router.get("/items")
        async def list_items(
            pagination: KeysetParams = Depends(get_keyset_params),
        ):
            ...
    """
    return KeysetParams(
        limit=limit,
        cursor=as_naive_utc(cursor) if cursor is not None else None,
        cursor_id=cursor_id,
    )


def clamp_limit(limit: int, maximum: int = MAX_LIMIT) -> int:
    """Clamp a requested page size into [1, maximum]."""
    return max(1, min(limit, maximum))


# =============================================================================
# Page Builder
# =============================================================================


@dataclass
class KeysetPage(Generic[T]):
    """
    Result container for keyset-paginated queries.

    next_cursor / next_cursor_id are both None on the last page.
    """

    items: list[T]
    next_cursor: datetime | None = None
    next_cursor_id: str | None = None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None


def build_keyset_page(rows: list[Any], limit: int) -> KeysetPage:
    """
    Build a page from a query that fetched limit + 1 rows.

    The extra row only signals that another page exists; it is dropped.
    Rows must expose updated_at and id.

    Usage:
        rows = await repo.list_after(cursor, cursor_id, limit + 1)
        page = build_keyset_page(rows, limit)
    """
    has_more = len(rows) > limit
    items = rows[:limit] if has_more else list(rows)

    if has_more and items:
        last = items[-1]
        return KeysetPage(
            items=items,
            next_cursor=last.updated_at,
            next_cursor_id=last.id,
        )

    return KeysetPage(items=items)
