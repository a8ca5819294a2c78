"""Note filtering by active tag chip, inline ``tag:`` clause and free text."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from notes_core.config import NotesSettings
from notes_core.config import settings as default_settings
from notes_core.models import Note
from notes_core.query import parse_search_query

logger = logging.getLogger(__name__)


def _haystack(note: Note) -> str:
    return f"{note.title}\n{note.body}\n{' '.join(note.tags)}".lower()


def matches_active_tag(
    note: Note, active_tag: Optional[str], sentinel: str = "all"
) -> bool:
    """Chip filter: exact, case-sensitive tag membership."""
    if not active_tag or active_tag == sentinel:
        return True
    return active_tag in note.tags


def matches_query_tag(note: Note, tag: Optional[str]) -> bool:
    """``tag:`` filter: case-insensitive tag membership."""
    if not tag:
        return True
    wanted = tag.lower()
    return any(t.lower() == wanted for t in note.tags)


def matches_text(note: Note, text: str) -> bool:
    """Substring search over title, body and tags."""
    needle = text.strip().lower()
    if not needle:
        return True
    return needle in _haystack(note)


def filter_notes(
    notes: Sequence[Note],
    raw_query: Optional[str],
    active_tag: Optional[str],
    *,
    settings: Optional[NotesSettings] = None,
) -> list[Note]:
    """Return the notes passing every filter, in their input order.

    The chip selection and the inline ``tag:`` clause are independent: a
    note must satisfy both, so conflicting selections produce no results.
    """
    settings = settings or default_settings
    parsed = parse_search_query(raw_query)

    result = [
        note
        for note in notes
        if matches_active_tag(note, active_tag, settings.all_tags_sentinel)
        and matches_query_tag(note, parsed.tag)
        and matches_text(note, parsed.text)
    ]
    logger.debug(
        "Filtered %d/%d notes — query='%s', active_tag=%s",
        len(result),
        len(notes),
        raw_query,
        active_tag,
    )
    return result
