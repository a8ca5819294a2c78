"""Shared fixtures.

The server module builds its storage at import time, so the storage path is
pointed at a throwaway directory before anything from the project is
imported. Remote sync is disabled unless a test wires a client explicitly.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

os.environ["NOTES_STORAGE_PATH"] = str(
    Path(tempfile.mkdtemp(prefix="notes-tests-")) / "notes_data.json"
)
os.environ["NOTES_API_BASE_URL"] = ""

import pytest  # noqa: E402

from mcp_servers.note_manager.storage import NoteStorage  # noqa: E402
from notes_core.models import Note  # noqa: E402


@pytest.fixture()
def sample_notes() -> list[Note]:
    """The three-note collection used across the filter tests."""
    return [
        Note(id="1", title="Work plan", body="Roadmap", tags=["work"]),
        Note(id="2", title="Personal", body="Gym", tags=["health"]),
        Note(id="3", title="Misc", body="Alpha", tags=["work", "ideas"]),
    ]


@pytest.fixture()
def tmp_storage(tmp_path: Path) -> NoteStorage:
    """Return a NoteStorage backed by a temp JSON file."""
    return NoteStorage(storage_path=tmp_path / "test_notes.json")
