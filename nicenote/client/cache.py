"""
Client Cache.

In-memory cache of the paginated note list and per-note detail records.
Supports optimistic patches and exact snapshot/restore for rollback.

Both representations of a note are kept: the detail record (with content)
and the list entry (with summary). Patch operations are no-ops when the
corresponding entry is not cached.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from nicenote.backend.core.markdown import generate_summary
from nicenote.client.models import Note, NoteListItem, NotesPage


@dataclass(frozen=True)
class CacheSnapshot:
    """Copy of both cached representations of one note."""

    note_id: str
    detail: Note | None
    list_entry: NoteListItem | None


class NoteCache:
    """
    Note list pages plus detail records, keyed by note id.

    Usage:
        cache = NoteCache()
        cache.set_first_page(await api.list_notes())
        cache.apply_local_edit(note_id, {"title": "Draft"})
    """

    def __init__(self) -> None:
        self._details: dict[str, Note] = {}
        self._pages: list[NotesPage] = []

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def pages(self) -> list[NotesPage]:
        return list(self._pages)

    @property
    def is_loaded(self) -> bool:
        """True once the first page has been stored."""
        return bool(self._pages)

    def read_detail(self, note_id: str) -> Note | None:
        return self._details.get(note_id)

    def read_list_entry(self, note_id: str) -> NoteListItem | None:
        for page in self._pages:
            for item in page.data:
                if item.id == note_id:
                    return item
        return None

    def list_entries(self) -> list[NoteListItem]:
        """All cached list entries, page order preserved."""
        return [item for page in self._pages for item in page.data]

    def next_page_params(self) -> tuple[str, str] | None:
        """Cursor pair for the page after the last cached one, if any."""
        if not self._pages:
            return None
        last = self._pages[-1]
        if not last.has_more:
            return None
        return last.next_cursor, last.next_cursor_id

    # -------------------------------------------------------------------------
    # Pages
    # -------------------------------------------------------------------------

    def set_first_page(self, page: NotesPage) -> None:
        """Replace every cached page with a freshly fetched first page."""
        self._pages = [page]

    def append_page(self, page: NotesPage) -> None:
        self._pages.append(page)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def set_detail(self, note: Note) -> None:
        self._details[note.id] = note

    def drop_detail(self, note_id: str) -> None:
        self._details.pop(note_id, None)

    def patch_detail(self, note_id: str, fields: dict[str, Any]) -> None:
        """Shallow-merge fields into the detail record, if cached."""
        note = self._details.get(note_id)
        if note is not None:
            self._details[note_id] = note.model_copy(update=fields)

    def patch_list_entry(self, note_id: str, fields: dict[str, Any]) -> None:
        """Shallow-merge fields into the list entry on whichever page holds it."""
        self._replace_list_entry(
            note_id,
            lambda item: item.model_copy(update=fields),
        )

    def insert_at_head(self, entry: NoteListItem) -> None:
        """
        Add a new entry to the first page, re-sorted by updated_at.

        Ties keep the new entry in front. No-op until the first page is loaded.
        """
        self._add_to_first_page(entry, front=True)

    def remove(self, note_id: str) -> None:
        """Drop the note from every page and forget its detail record."""
        self._pages = [
            page.model_copy(update={"data": [i for i in page.data if i.id != note_id]})
            for page in self._pages
        ]
        self._details.pop(note_id, None)

    def restore_list_entry(self, entry: NoteListItem) -> None:
        """
        Put a removed entry back into the first page.

        Only the first page is re-sorted (updated_at descending); later
        pages are left alone.
        """
        self._add_to_first_page(entry, front=False)

    def _add_to_first_page(self, entry: NoteListItem, *, front: bool) -> None:
        if not self._pages:
            return
        first = self._pages[0]
        rows = [entry, *first.data] if front else [*first.data, entry]
        data = sorted(rows, key=lambda item: item.updated_at, reverse=True)
        self._pages[0] = first.model_copy(update={"data": data})

    # -------------------------------------------------------------------------
    # Autosave support
    # -------------------------------------------------------------------------

    def apply_local_edit(self, note_id: str, updates: dict[str, Any]) -> None:
        """
        Apply an unsaved edit to both representations.

        The detail record takes title/content as typed; the list entry takes
        the title and a summary recomputed from the new content. Both get a
        local updated_at so the edit sorts as most recent.
        """
        now = datetime.now(timezone.utc)

        detail_patch: dict[str, Any] = {"updated_at": now}
        list_patch: dict[str, Any] = {"updated_at": now}
        if "title" in updates:
            detail_patch["title"] = updates["title"]
            list_patch["title"] = updates["title"]
        if "content" in updates:
            detail_patch["content"] = updates["content"]
            list_patch["summary"] = generate_summary(updates["content"] or "")

        self.patch_detail(note_id, detail_patch)
        self.patch_list_entry(note_id, list_patch)

    def merge_server_timestamps(self, note_id: str, note: Note) -> None:
        """
        Merge only the server-owned timestamps into both representations.

        Title and content are never taken from the server echo, so edits
        made while a save was in flight are not overwritten.
        """
        fields = {"created_at": note.created_at, "updated_at": note.updated_at}
        self.patch_detail(note_id, fields)
        self.patch_list_entry(note_id, fields)

    def snapshot(self, note_id: str) -> CacheSnapshot:
        detail = self.read_detail(note_id)
        list_entry = self.read_list_entry(note_id)
        return CacheSnapshot(
            note_id=note_id,
            detail=detail.model_copy() if detail is not None else None,
            list_entry=list_entry.model_copy() if list_entry is not None else None,
        )

    def restore(self, snapshot: CacheSnapshot) -> None:
        """
        Put back whatever the snapshot captured.

        A representation that was absent at snapshot time is left untouched.
        """
        if snapshot.detail is not None:
            self._details[snapshot.note_id] = snapshot.detail
        if snapshot.list_entry is not None:
            entry = snapshot.list_entry
            self._replace_list_entry(snapshot.note_id, lambda _item: entry)

    def clear(self) -> None:
        self._details.clear()
        self._pages = []

    def _replace_list_entry(
        self,
        note_id: str,
        replace: Callable[[NoteListItem], NoteListItem],
    ) -> None:
        for index, page in enumerate(self._pages):
            for position, item in enumerate(page.data):
                if item.id == note_id:
                    data = list(page.data)
                    data[position] = replace(item)
                    self._pages[index] = page.model_copy(update={"data": data})
                    return
