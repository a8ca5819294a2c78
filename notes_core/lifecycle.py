"""Creation and mutation rules for notes.

Every function here returns a new :class:`Note`; inputs are never mutated.
``created_at`` is written once, and ``updated_at`` never moves backwards.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Optional
from uuid import uuid4

from notes_core.config import NotesSettings
from notes_core.config import settings as default_settings
from notes_core.models import Note
from notes_core.timestamps import to_iso, try_parse_timestamp, utc_now


def new_note_id() -> str:
    """Return a globally unique note identifier."""
    return str(uuid4())


def create_empty_note(
    *,
    now: Optional[datetime] = None,
    id_factory: Optional[Callable[[], str]] = None,
    settings: Optional[NotesSettings] = None,
) -> Note:
    """Create a blank note stamped with the current time."""
    settings = settings or default_settings
    stamp = to_iso(now or utc_now())
    return Note(
        id=(id_factory or new_note_id)(),
        title=settings.untitled_title,
        body="",
        tags=[],
        created_at=stamp,
        updated_at=stamp,
    )


def touch_note(note: Note, *, now: Optional[datetime] = None) -> Note:
    """Return a copy of *note* with ``updated_at`` refreshed.

    A missing ``created_at`` is backfilled with the same instant. If the
    clock reads earlier than the stored timestamps, the latest stored value
    is kept instead so ``updated_at`` stays monotonic.
    """
    moment = now or utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)

    created_at = note.created_at or to_iso(moment)
    updated_at = to_iso(moment)

    floor = max(
        (
            ts
            for ts in (
                try_parse_timestamp(created_at),
                try_parse_timestamp(note.updated_at),
            )
            if ts is not None
        ),
        default=None,
    )
    if floor is not None and floor > moment:
        updated_at = to_iso(floor)

    return note.model_copy(update={"created_at": created_at, "updated_at": updated_at})


def parse_tags_text(text: Optional[str]) -> list[str]:
    """Split comma separated tag input, dropping blanks and repeats."""
    return dedupe_tags((text or "").split(","))


def dedupe_tags(tags: Iterable[str]) -> list[str]:
    """Trim tags and keep the first occurrence of each, in order."""
    seen: dict[str, None] = {}
    for tag in tags:
        cleaned = str(tag).strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def apply_edits(
    note: Note,
    *,
    title: Optional[str] = None,
    body: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None,
    settings: Optional[NotesSettings] = None,
) -> Note:
    """Apply draft values to *note* and touch it.

    A blank title falls back to the configured untitled default. Arguments
    left as None keep the note's current value.
    """
    settings = settings or default_settings
    update: dict = {}
    if title is not None:
        update["title"] = title.strip() or settings.untitled_title
    if body is not None:
        update["body"] = body
    if tags is not None:
        update["tags"] = dedupe_tags(tags)
    return touch_note(note.model_copy(update=update), now=now)


def has_unsaved_changes(
    note: Note,
    *,
    title: Optional[str] = None,
    body: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
) -> bool:
    """Whether draft values differ from what *note* holds."""
    if title is not None and title != note.title:
        return True
    if body is not None and body != note.body:
        return True
    if tags is not None and dedupe_tags(tags) != list(note.tags):
        return True
    return False


def collect_tags(notes: Iterable[Note]) -> list[str]:
    """Every distinct tag across *notes*, sorted case-insensitively."""
    found = {tag for note in notes for tag in note.tags}
    return sorted(found, key=lambda t: (t.casefold(), t))
