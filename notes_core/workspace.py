"""Editing session over a note store with best-effort remote sync.

Local storage is the source of truth: every change is written locally
first, then pushed to the remote API if one is configured. A failed push
leaves the local change in place and flips ``save_state`` to ``error``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from notes_core.config import NotesSettings
from notes_core.config import settings as default_settings
from notes_core.filtering import filter_notes
from notes_core.lifecycle import (
    apply_edits,
    collect_tags,
    create_empty_note,
    has_unsaved_changes,
)
from notes_core.models import Note, SaveState
from notes_core.sorting import effective_timestamp, sort_by_recency
from notes_core.sync_client import NotesApiClient, SyncError
from notes_core.timestamps import to_iso, utc_now

if TYPE_CHECKING:
    from mcp_servers.note_manager.storage import NoteStorage

logger = logging.getLogger(__name__)


class NoteNotFoundError(KeyError):
    """No note with the requested id exists in the workspace."""

    def __init__(self, note_id: str) -> None:
        super().__init__(note_id)
        self.note_id = note_id

    def __str__(self) -> str:
        return f"Note not found: {self.note_id}"


class NotesWorkspace:
    """Create, edit, delete and browse notes over a storage backend."""

    def __init__(
        self,
        storage: NoteStorage,
        api: Optional[NotesApiClient] = None,
        settings: Optional[NotesSettings] = None,
    ) -> None:
        self.storage = storage
        self.api = api
        self.settings = settings or default_settings
        self.selected_id: Optional[str] = None
        self.save_state = SaveState.SAVED
        self.last_synced_at: Optional[str] = None

    @property
    def notes(self) -> list[Note]:
        return self.storage.get_all()

    @property
    def selected_note(self) -> Optional[Note]:
        if self.selected_id is None:
            return None
        return self.storage.get(self.selected_id)

    def get_note(self, note_id: str) -> Note:
        note = self.storage.get(note_id)
        if note is None:
            raise NoteNotFoundError(note_id)
        return note

    # ------------------------------------------------------------------
    # Browsing
    # ------------------------------------------------------------------

    def visible_notes(
        self, query: Optional[str] = "", active_tag: Optional[str] = None
    ) -> list[Note]:
        """Filtered notes, most recent first."""
        return sort_by_recency(
            filter_notes(self.notes, query, active_tag, settings=self.settings)
        )

    def all_tags(self) -> list[str]:
        return collect_tags(self.notes)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def ensure_note(self) -> Optional[Note]:
        """Guarantee a selection: create a first note if the store is empty."""
        notes = self.notes
        if not notes:
            return self.create_note()
        if self.selected_note is None:
            self.selected_id = notes[0].id
        return self.selected_note

    def create_note(self, *, now: Optional[datetime] = None) -> Note:
        """Create an empty note, select it and push it remotely."""
        note = create_empty_note(now=now, settings=self.settings)
        self.storage.put(note, prepend=True)
        self.selected_id = note.id
        self.save_state = SaveState.SAVED
        self._push(note)
        return note

    def mark_draft(
        self,
        note_id: str,
        *,
        title: Optional[str] = None,
        body: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> SaveState:
        """Record whether draft values differ from the stored note."""
        note = self.get_note(note_id)
        dirty = has_unsaved_changes(note, title=title, body=body, tags=tags)
        self.save_state = SaveState.DIRTY if dirty else SaveState.SAVED
        return self.save_state

    def update_note(
        self,
        note_id: str,
        *,
        title: Optional[str] = None,
        body: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
        now: Optional[datetime] = None,
    ) -> Note:
        """Apply edits, save locally, then sync."""
        current = self.get_note(note_id)
        updated = apply_edits(
            current, title=title, body=body, tags=tags, now=now, settings=self.settings
        )
        self.storage.put(updated)
        self.save_state = SaveState.SAVING
        self.save_state = SaveState.SAVED if self._push(updated) else SaveState.ERROR
        return updated

    def delete_note(self, note_id: str) -> bool:
        """Delete locally and remotely; move the selection if needed."""
        if not self.storage.delete(note_id):
            return False

        if self.selected_id == note_id:
            remaining = self.notes
            self.selected_id = remaining[0].id if remaining else None

        if self.api is not None:
            try:
                self.api.delete_note(note_id)
            except SyncError as exc:
                logger.warning("Deleted %s locally, remote delete failed: %s", note_id, exc)
        return True

    def pull_remote(self) -> int:
        """Store remote notes that are new or newer than the local copy."""
        if self.api is None:
            return 0
        try:
            remote = self.api.list_notes()
        except SyncError as exc:
            logger.warning("Could not list remote notes: %s", exc)
            return 0
        if not remote:
            return 0

        stored = 0
        for note in remote:
            local = self.storage.get(note.id)
            if local is None or effective_timestamp(note) > effective_timestamp(local):
                self.storage.put(note)
                stored += 1
        logger.info("Pulled %d of %d remote notes", stored, len(remote))
        return stored

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _push(self, note: Note) -> bool:
        """Upsert *note* remotely. Returns False if the remote call failed."""
        if self.api is None or not self.api.has_api:
            return True
        try:
            self.api.upsert_note(note)
        except SyncError as exc:
            logger.warning("Saved %s locally, but failed to sync: %s", note.id, exc)
            return False
        self.last_synced_at = to_iso(utc_now())
        return True
