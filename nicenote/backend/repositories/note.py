"""
Note Repository.

Data access layer for notes. Handles all database operations
for the Note model.
"""

from datetime import datetime

from sqlalchemy import and_, or_, select

from nicenote.backend.core.pagination import KeysetPage, build_keyset_page, clamp_limit
from nicenote.backend.models.note import Note
from nicenote.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds the keyset-paginated listing.
    """

    model = Note

    async def list_page(
        self,
        cursor: datetime | None = None,
        cursor_id: str | None = None,
        limit: int = 50,
    ) -> KeysetPage[Note]:
        """
        Get one page of notes ordered by (updated_at DESC, id DESC).

        Args:
            cursor: updated_at of the last note on the previous page (naive UTC)
            cursor_id: id of that note; breaks ties between equal timestamps
            limit: Page size, clamped to the application maximum

        Returns:
            KeysetPage with the notes and the cursor for the next page
        """
        limit = clamp_limit(limit)

        query = select(Note)
        if cursor is not None and cursor_id:
            query = query.where(
                or_(
                    Note.updated_at < cursor,
                    and_(Note.updated_at == cursor, Note.id < cursor_id),
                )
            )
        elif cursor is not None:
            query = query.where(Note.updated_at < cursor)

        result = await self.session.execute(
            query
            .order_by(Note.updated_at.desc(), Note.id.desc())
            .limit(limit + 1)
        )
        return build_keyset_page(list(result.scalars().all()), limit)
