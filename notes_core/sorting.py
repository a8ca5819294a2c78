"""Recency ordering for notes."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from notes_core.models import Note
from notes_core.timestamps import EPOCH, try_parse_timestamp


def effective_timestamp(note: Note) -> datetime:
    """``updated_at`` if usable, else ``created_at``, else ``EPOCH``."""
    for value in (note.updated_at, note.created_at):
        parsed = try_parse_timestamp(value)
        if parsed is not None:
            return parsed
    return EPOCH


def sort_by_recency(notes: Iterable[Note]) -> list[Note]:
    """Most recently updated first; equal timestamps keep input order."""
    # sorted() stays stable with reverse=True
    return sorted(notes, key=effective_timestamp, reverse=True)
