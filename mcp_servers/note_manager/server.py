"""
Note Manager MCP Server

Exposes tools for creating, editing, deleting, searching and tagging notes
via the Model Context Protocol.  Runs with SSE transport on the configured
host and port (8001 by default).
"""

import logging
from datetime import UTC, datetime

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from notes_core.config import settings
from notes_core.formatting import format_datetime, preview
from notes_core.highlight import highlight
from notes_core.metrics import SEARCH_REQUESTS
from notes_core.models import Note
from notes_core.query import parse_search_query
from notes_core.sync_client import NotesApiClient
from notes_core.workspace import NoteNotFoundError, NotesWorkspace

from .storage import NoteStorage

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logger = logging.getLogger("note_manager")

# ---------------------------------------------------------------------------
# MCP server + workspace
# ---------------------------------------------------------------------------
mcp = FastMCP("note-manager", host=settings.server_host, port=settings.server_port)
workspace = NotesWorkspace(
    NoteStorage(settings.storage_path),
    api=NotesApiClient.from_settings(settings),
    settings=settings,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _note_summary(note: Note, needle: str = "") -> dict:
    """Serialize a note with display fields and highlight segments."""
    summary = preview(note, settings=workspace.settings)
    return {
        **note.to_wire(),
        "preview": summary,
        "preview_segments": [s.model_dump() for s in highlight(summary, needle)],
        "created": format_datetime(note.created_at, settings=workspace.settings),
        "updated": format_datetime(note.updated_at, settings=workspace.settings),
        "title_segments": [s.model_dump() for s in highlight(note.title, needle)],
        "body_segments": [s.model_dump() for s in highlight(note.body, needle)],
    }


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool()
def create_note(
    title: str | None = None, body: str = "", tags: list[str] | None = None
) -> dict:
    """Create a new note, optionally with a title, body, and tags.

    Use this tool when the user wants to write down or remember something.
    A blank title becomes the default "Untitled note".

    Args:
        title: Optional note title.
        body: Optional note text.
        tags: Optional list of tags for categorisation.

    Returns:
        Dictionary with the created note and a confirmation message.
    """
    note = workspace.create_note()
    if title is not None or body or tags:
        note = workspace.update_note(note.id, title=title, body=body, tags=tags)
    logger.info("Tool create_note invoked — id=%s", note.id)
    return {
        "note": note.to_wire(),
        "save_state": workspace.save_state.value,
        "message": f"Note '{note.title}' created.",
    }


@mcp.tool()
def update_note(
    note_id: str,
    title: str | None = None,
    body: str | None = None,
    tags: list[str] | None = None,
) -> dict:
    """Edit the title, body, or tags of an existing note.

    Fields that are omitted keep their current value.

    Args:
        note_id: Identifier of the note to edit.
        title: New title (blank falls back to "Untitled note").
        body: New body text.
        tags: Replacement list of tags (duplicates are dropped).

    Returns:
        Dictionary with the updated note and the save state, or an error.
    """
    logger.info("Tool update_note invoked — id=%s", note_id)
    try:
        note = workspace.update_note(note_id, title=title, body=body, tags=tags)
    except (NoteNotFoundError, ValidationError) as exc:
        logger.warning("update_note failed: %s", exc)
        return {"note_id": note_id, "error": str(exc)}
    return {"note": note.to_wire(), "save_state": workspace.save_state.value}


@mcp.tool()
def delete_note(note_id: str) -> dict:
    """Delete a note by id.

    Args:
        note_id: Identifier of the note to delete.

    Returns:
        Dictionary with whether the note was deleted.
    """
    deleted = workspace.delete_note(note_id)
    logger.info("Tool delete_note invoked — id=%s, deleted=%s", note_id, deleted)
    if not deleted:
        return {"note_id": note_id, "deleted": False, "error": "Note not found."}
    return {"note_id": note_id, "deleted": True}


@mcp.tool()
def get_note(note_id: str) -> dict:
    """Fetch one note with its preview and formatted dates.

    Args:
        note_id: Identifier of the note.

    Returns:
        Dictionary with the note, or an error if it does not exist.
    """
    logger.info("Tool get_note invoked — id=%s", note_id)
    try:
        note = workspace.get_note(note_id)
    except NoteNotFoundError as exc:
        return {"note_id": note_id, "error": str(exc)}
    return {"note": _note_summary(note)}


@mcp.tool()
def search_notes(query: str = "", active_tag: str | None = "all") -> dict:
    """Search notes by keyword and tag, most recently updated first.

    Use this tool when the user wants to find or browse notes.  The query
    matches title, body, and tags (case-insensitive substring).  Include
    ``tag:name`` or ``tag:"multi word"`` in the query to require a tag.

    Args:
        query: Free-text search, optionally with one tag: clause.
        active_tag: Exact tag to restrict to, or "all" for no restriction.

    Returns:
        Dictionary with the parsed query, match count, and matching notes
        with highlight segments for title, preview and body.
    """
    parsed = parse_search_query(query)
    SEARCH_REQUESTS.labels(has_tag=str(parsed.tag is not None).lower()).inc()

    results = workspace.visible_notes(query, active_tag)
    logger.info(
        "Tool search_notes invoked — query='%s', active_tag=%s, found=%d",
        query,
        active_tag,
        len(results),
    )
    return {
        "query": parsed.model_dump(),
        "count": len(results),
        "notes": [_note_summary(n, parsed.text) for n in results],
    }


@mcp.tool()
def list_tags() -> dict:
    """List every tag in use, sorted alphabetically.

    Returns:
        Dictionary with the tags and the "all" sentinel used for no filter.
    """
    tags = workspace.all_tags()
    logger.info("Tool list_tags invoked — found=%d", len(tags))
    return {"all": workspace.settings.all_tags_sentinel, "tags": tags}


@mcp.tool()
def health_check() -> dict:
    """Check whether the Note Manager server is healthy.

    Use this tool to verify the server is running and responsive.

    Returns:
        Dictionary with server status, note count, sync status, and timestamp.
    """
    logger.info("Tool health_check invoked")
    return {
        "status": "healthy",
        "server": "note-manager",
        "total_notes": workspace.storage.count,
        "sync_enabled": workspace.api is not None and workspace.api.has_api,
        "save_state": workspace.save_state.value,
        "timestamp": datetime.now(UTC).isoformat(),
    }


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )
    workspace.pull_remote()
    logger.info(
        "Starting Note Manager MCP server on port %d ...", settings.server_port
    )
    try:
        mcp.run(transport="sse")
    finally:
        if workspace.api is not None:
            workspace.api.close()
