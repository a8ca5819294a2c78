"""REST client for best-effort note synchronization.

Talks to a remote notes collection at ``{base}{path}``:

  GET    {base}/notes        — list notes
  PUT    {base}/notes/{id}   — create or replace a note
  DELETE {base}/notes/{id}   — delete a note

When no base URL is configured every call is a no-op returning None, so
callers can keep working against local storage only.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from notes_core.config import NotesSettings
from notes_core.config import settings as default_settings
from notes_core.metrics import SYNC_DURATION, SYNC_OPERATIONS
from notes_core.models import Note

logger = logging.getLogger(__name__)


class SyncError(Exception):
    """A remote sync call failed or returned a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _safe_json(response: httpx.Response) -> Any:
    """Decode a JSON body, returning None for empty or invalid payloads."""
    text = response.text
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


class NotesApiClient:
    """Synchronous client for the remote notes endpoint."""

    def __init__(
        self,
        base_url: str = "",
        notes_path: str = "/notes",
        timeout: float = 10.0,
    ) -> None:
        self._base = base_url.strip().rstrip("/")
        self._path = "/" + notes_path.strip("/")
        self._timeout = timeout
        self._client: Optional[httpx.Client] = None

    @classmethod
    def from_settings(cls, settings: Optional[NotesSettings] = None) -> NotesApiClient:
        settings = settings or default_settings
        return cls(
            base_url=settings.api_base_url,
            notes_path=settings.api_notes_path,
            timeout=settings.api_timeout,
        )

    @property
    def has_api(self) -> bool:
        """Whether a remote endpoint is configured."""
        return bool(self._base)

    def __enter__(self) -> NotesApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        if self._client is not None:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def list_notes(self) -> Optional[list[Note]]:
        """Fetch all remote notes. Invalid records are skipped."""
        if not self.has_api:
            return None
        payload = self._request("list", "GET", self._path)
        if isinstance(payload, dict):
            payload = payload.get("notes")
        if not isinstance(payload, list):
            return []

        notes: list[Note] = []
        for record in payload:
            try:
                notes.append(Note.model_validate(record))
            except ValidationError as exc:
                logger.warning("Skipping invalid remote note: %s", exc)
        return notes

    def upsert_note(self, note: Note) -> Any:
        """Create or replace *note* on the remote store."""
        if not self.has_api:
            return None
        return self._request(
            "upsert", "PUT", self._item_path(note.id), payload=note.to_wire()
        )

    def delete_note(self, note_id: str) -> Any:
        """Delete the remote copy of *note_id*."""
        if not self.has_api:
            return None
        return self._request("delete", "DELETE", self._item_path(note_id))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _item_path(self, note_id: str) -> str:
        return f"{self._path}/{quote(note_id, safe='')}"

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._base,
                timeout=self._timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Send one request, recording metrics and mapping failures."""
        start = time.perf_counter()
        logger.debug("Sync %s — %s %s", operation, method, path)
        try:
            response = self._http().request(method, path, json=payload)
        except httpx.TimeoutException as exc:
            self._record(operation, "error", start)
            logger.warning("Sync %s timed out after %.1fs", operation, self._timeout)
            raise SyncError(f"Timed out trying to {operation} note(s)") from exc
        except httpx.HTTPError as exc:
            self._record(operation, "error", start)
            logger.warning("Sync %s failed: %s", operation, exc)
            raise SyncError(f"Failed to {operation} note(s): {exc}") from exc

        if not response.is_success:
            self._record(operation, "error", start)
            logger.warning(
                "Sync %s rejected — status=%d", operation, response.status_code
            )
            raise SyncError(
                f"Failed to {operation} note(s): {response.status_code}",
                status_code=response.status_code,
            )

        self._record(operation, "success", start)
        return _safe_json(response)

    @staticmethod
    def _record(operation: str, status: str, start: float) -> None:
        SYNC_OPERATIONS.labels(operation=operation, status=status).inc()
        SYNC_DURATION.labels(operation=operation).observe(time.perf_counter() - start)
