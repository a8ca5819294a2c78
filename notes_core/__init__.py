"""Note querying, filtering, sorting and highlighting."""

from notes_core.config import NotesSettings, settings
from notes_core.filtering import filter_notes
from notes_core.formatting import format_datetime, preview
from notes_core.highlight import highlight
from notes_core.lifecycle import (
    apply_edits,
    collect_tags,
    create_empty_note,
    dedupe_tags,
    has_unsaved_changes,
    parse_tags_text,
    touch_note,
)
from notes_core.models import HighlightSegment, Note, ParsedQuery, SaveState
from notes_core.query import parse_search_query
from notes_core.sorting import effective_timestamp, sort_by_recency
from notes_core.timestamps import EPOCH, parse_timestamp

__all__ = [
    "EPOCH",
    "HighlightSegment",
    "Note",
    "NotesSettings",
    "ParsedQuery",
    "SaveState",
    "apply_edits",
    "collect_tags",
    "create_empty_note",
    "dedupe_tags",
    "effective_timestamp",
    "filter_notes",
    "format_datetime",
    "has_unsaved_changes",
    "highlight",
    "parse_search_query",
    "parse_tags_text",
    "parse_timestamp",
    "preview",
    "settings",
    "sort_by_recency",
    "touch_note",
]
