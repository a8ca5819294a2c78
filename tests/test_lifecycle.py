"""Tests for the note model, timestamps and lifecycle helpers."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from notes_core.config import NotesSettings
from notes_core.lifecycle import (
    apply_edits,
    collect_tags,
    create_empty_note,
    has_unsaved_changes,
    parse_tags_text,
    touch_note,
)
from notes_core.models import Note, NoteStore
from notes_core.timestamps import EPOCH, parse_timestamp, to_iso, try_parse_timestamp

NOW = datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)


class TestNoteModel:
    def test_defaults(self) -> None:
        note = Note(id="1")
        assert note.title == ""
        assert note.body == ""
        assert note.tags == []
        assert note.created_at is None
        assert note.updated_at is None

    def test_null_fields_become_empty(self) -> None:
        note = Note.model_validate(
            {"id": "1", "title": None, "body": None, "tags": None, "updatedAt": None}
        )
        assert note.title == ""
        assert note.body == ""
        assert note.tags == []
        assert note.updated_at is None

    def test_id_required(self) -> None:
        with pytest.raises(ValidationError):
            Note(id="")
        with pytest.raises(ValidationError):
            Note.model_validate({"title": "no id"})

    def test_wire_names_accepted_and_emitted(self) -> None:
        note = Note.model_validate(
            {"id": "1", "createdAt": "2025-01-01", "updatedAt": "2025-01-02", "x": 1}
        )
        assert note.created_at == "2025-01-01"
        assert note.updated_at == "2025-01-02"
        wire = note.to_wire()
        assert wire["createdAt"] == "2025-01-01"
        assert wire["updatedAt"] == "2025-01-02"
        assert "x" not in wire

    def test_snake_case_names_accepted(self) -> None:
        note = Note(id="1", created_at="a", updated_at="b")
        assert (note.created_at, note.updated_at) == ("a", "b")

    def test_store_roundtrip(self) -> None:
        store = NoteStore(notes=[Note(id="1", title="T", tags=["x"], created_at="c")])
        restored = NoteStore.model_validate_json(store.model_dump_json(by_alias=True))
        assert restored.notes[0].title == "T"
        assert restored.notes[0].created_at == "c"


class TestTimestamps:
    def test_iso_strings(self) -> None:
        assert parse_timestamp("2025-01-02T00:00:00Z") == datetime(2025, 1, 2, tzinfo=UTC)
        assert parse_timestamp("2025-01-02T05:00:00+05:00") == datetime(
            2025, 1, 2, tzinfo=UTC
        )

    def test_naive_taken_as_utc(self) -> None:
        assert parse_timestamp("2025-01-02T00:00:00") == datetime(2025, 1, 2, tzinfo=UTC)
        assert parse_timestamp(datetime(2025, 1, 2)) == datetime(2025, 1, 2, tzinfo=UTC)

    def test_unix_seconds(self) -> None:
        assert parse_timestamp(86400) == datetime(1970, 1, 2, tzinfo=UTC)
        assert parse_timestamp(0) == EPOCH
        assert try_parse_timestamp(0) == EPOCH

    @pytest.mark.parametrize(
        "value", [None, "", "   ", "not-a-date", float("nan"), True, [], 10**20]
    )
    def test_unusable_values(self, value) -> None:
        assert parse_timestamp(value) == EPOCH
        assert try_parse_timestamp(value) is None

    def test_to_iso(self) -> None:
        assert to_iso(NOW) == "2025-01-02T03:04:05+00:00"
        assert to_iso(datetime(2025, 1, 2)) == "2025-01-02T00:00:00+00:00"


class TestCreateEmptyNote:
    def test_skeleton(self) -> None:
        note = create_empty_note(now=NOW)
        assert note.title == "Untitled note"
        assert note.body == ""
        assert note.tags == []
        assert note.created_at == "2025-01-02T03:04:05+00:00"
        assert note.updated_at == note.created_at

    def test_ids_are_unique(self) -> None:
        ids = {create_empty_note().id for _ in range(200)}
        assert len(ids) == 200

    def test_id_factory_and_settings(self) -> None:
        cfg = NotesSettings(untitled_title="New")
        note = create_empty_note(now=NOW, id_factory=lambda: "fixed", settings=cfg)
        assert note.id == "fixed"
        assert note.title == "New"

    def test_defaults_to_current_time(self) -> None:
        before = datetime.now(UTC)
        note = create_empty_note()
        after = datetime.now(UTC)
        assert before <= parse_timestamp(note.created_at) <= after


class TestTouchNote:
    def _note(self) -> Note:
        return Note(
            id="1",
            title="A",
            created_at="2025-01-01T00:00:00+00:00",
            updated_at="2025-01-01T00:00:00+00:00",
        )

    def test_preserves_created_and_bumps_updated(self) -> None:
        later = datetime(2025, 1, 5, 10, tzinfo=UTC)
        touched = touch_note(self._note(), now=later)
        assert touched.created_at == "2025-01-01T00:00:00+00:00"
        assert touched.updated_at == "2025-01-05T10:00:00+00:00"

    def test_does_not_mutate_input(self) -> None:
        note = self._note()
        touch_note(note, now=NOW)
        assert note.updated_at == "2025-01-01T00:00:00+00:00"

    def test_backfills_missing_created(self) -> None:
        touched = touch_note(Note(id="1"), now=NOW)
        assert touched.created_at == touched.updated_at == to_iso(NOW)

    def test_strictly_monotonic_across_instants(self) -> None:
        first = touch_note(self._note(), now=NOW)
        second = touch_note(first, now=NOW + timedelta(microseconds=1))
        assert parse_timestamp(second.updated_at) > parse_timestamp(first.updated_at)
        assert second.created_at == first.created_at == "2025-01-01T00:00:00+00:00"

    def test_clock_behind_keeps_latest(self) -> None:
        note = self._note().model_copy(update={"updated_at": "2025-03-01T00:00:00Z"})
        touched = touch_note(note, now=datetime(2025, 2, 1, tzinfo=UTC))
        assert parse_timestamp(touched.updated_at) == datetime(2025, 3, 1, tzinfo=UTC)

    def test_never_before_created(self) -> None:
        note = Note(id="1", created_at="2030-01-01T00:00:00+00:00")
        touched = touch_note(note, now=NOW)
        assert parse_timestamp(touched.updated_at) >= parse_timestamp(touched.created_at)


class TestTagHelpers:
    def test_parse_tags_text(self) -> None:
        assert parse_tags_text("work, ideas, ,work,  deep work ") == [
            "work",
            "ideas",
            "deep work",
        ]
        assert parse_tags_text("") == []
        assert parse_tags_text(None) == []

    def test_collect_tags_sorted_and_unique(self) -> None:
        notes = [Note(id="1", tags=["b", "A"]), Note(id="2", tags=["a", "b"])]
        assert collect_tags(notes) == ["A", "a", "b"]
        assert collect_tags([]) == []


class TestApplyEdits:
    def test_applies_fields_and_touches(self) -> None:
        note = create_empty_note(now=NOW)
        later = NOW + timedelta(minutes=5)
        edited = apply_edits(
            note, title="  Plan  ", body="Body\n", tags=["x", "x", " y "], now=later
        )
        assert edited.title == "Plan"
        assert edited.body == "Body\n"
        assert edited.tags == ["x", "y"]
        assert edited.created_at == note.created_at
        assert edited.updated_at == to_iso(later)

    def test_blank_title_uses_default(self) -> None:
        edited = apply_edits(Note(id="1", title="Old"), title="   ", now=NOW)
        assert edited.title == "Untitled note"

    def test_none_keeps_current_values(self) -> None:
        note = Note(id="1", title="T", body="B", tags=["t"])
        edited = apply_edits(note, now=NOW)
        assert (edited.title, edited.body, edited.tags) == ("T", "B", ["t"])


class TestHasUnsavedChanges:
    def test_detects_each_field(self) -> None:
        note = Note(id="1", title="T", body="B", tags=["a", "b"])
        assert not has_unsaved_changes(note, title="T", body="B", tags=["a", "b"])
        assert has_unsaved_changes(note, title="T2")
        assert has_unsaved_changes(note, body="B2")
        assert has_unsaved_changes(note, tags=["b", "a"])

    def test_tag_duplicates_ignored(self) -> None:
        note = Note(id="1", tags=["a"])
        assert not has_unsaved_changes(note, tags=["a", " a "])
