"""JSON file-based storage layer for the Note Manager."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from notes_core.config import settings
from notes_core.metrics import STORED_NOTES
from notes_core.models import Note, NoteStore

logger = logging.getLogger("note_manager.storage")


class NoteStorage:
    """Manages note persistence using a local JSON file."""

    def __init__(self, storage_path: Optional[Path] = None) -> None:
        self._path = Path(storage_path or settings.storage_path)
        self._store = NoteStore()
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        """Load notes from disk. Creates file if missing.

        Invalid records are skipped; a file that cannot be read as a note
        list is moved aside to ``<name>.corrupt`` before starting fresh.
        """
        if not self._path.exists():
            logger.info("No storage file found at %s — starting fresh", self._path)
            self._persist()
            return

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            self._set_aside(exc)
            return

        records = raw.get("notes") if isinstance(raw, dict) else raw
        if not isinstance(records, list):
            self._set_aside(f"unexpected layout ({type(raw).__name__})")
            return

        notes: list[Note] = []
        for record in records:
            try:
                notes.append(Note.model_validate(record))
            except ValidationError as exc:
                logger.warning("Skipping invalid stored note: %s", exc)
        self._store = NoteStore(notes=notes)
        logger.info("Loaded %d notes from %s", len(notes), self._path)
        STORED_NOTES.set(len(notes))

    def _set_aside(self, reason) -> None:
        backup = self._path.with_name(self._path.name + ".corrupt")
        self._path.replace(backup)
        logger.error(
            "Failed to load notes: %s — moved file to %s, starting fresh",
            reason,
            backup,
        )
        self._store = NoteStore()
        STORED_NOTES.set(0)

    def _persist(self) -> None:
        """Write current state to disk."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            self._store.model_dump_json(indent=2, by_alias=True),
            encoding="utf-8",
        )
        STORED_NOTES.set(len(self._store.notes))

    def _index_of(self, note_id: str) -> Optional[int]:
        for index, note in enumerate(self._store.notes):
            if note.id == note_id:
                return index
        return None

    def get_all(self) -> list[Note]:
        """Return every stored note in storage order."""
        return list(self._store.notes)

    def get(self, note_id: str) -> Optional[Note]:
        """Return the note with *note_id*, or None."""
        index = self._index_of(note_id)
        return None if index is None else self._store.notes[index]

    def put(self, note: Note, *, prepend: bool = False) -> Note:
        """Insert or replace a note by id and persist.

        A replaced note keeps its position; a new one is appended, or put
        first when *prepend* is set.
        """
        index = self._index_of(note.id)
        if index is not None:
            self._store.notes[index] = note
        elif prepend:
            self._store.notes.insert(0, note)
        else:
            self._store.notes.append(note)
        self._persist()
        logger.info("Saved note %s — '%s'", note.id, note.title)
        return note

    def delete(self, note_id: str) -> bool:
        """Remove a note by id. Returns False if it was not stored."""
        index = self._index_of(note_id)
        if index is None:
            return False
        del self._store.notes[index]
        self._persist()
        logger.info("Deleted note %s", note_id)
        return True

    @property
    def count(self) -> int:
        """Number of stored notes."""
        return len(self._store.notes)
