"""Display helpers for note lists."""

from __future__ import annotations

import re
from typing import Any, Optional

from notes_core.config import NotesSettings
from notes_core.config import settings as default_settings
from notes_core.models import Note
from notes_core.timestamps import try_parse_timestamp

_WHITESPACE = re.compile(r"\s+")


def preview(note: Note, *, settings: Optional[NotesSettings] = None) -> str:
    """One-line preview of the note body."""
    settings = settings or default_settings
    compact = _WHITESPACE.sub(" ", note.body or "").strip()
    return compact or settings.empty_preview


def format_datetime(
    timestamp: Any, *, settings: Optional[NotesSettings] = None
) -> str:
    """Short local date and time, or the placeholder for unusable input."""
    settings = settings or default_settings
    moment = try_parse_timestamp(timestamp)
    if moment is None:
        return settings.missing_date
    try:
        return moment.astimezone().strftime(settings.datetime_format)
    except (OverflowError, ValueError, OSError):
        return settings.missing_date
