"""Notes organizer configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings

DEFAULT_STORAGE_PATH = (
    Path(__file__).resolve().parent.parent
    / "mcp_servers"
    / "note_manager"
    / "notes_data.json"
)


class NotesSettings(BaseSettings):
    """Application settings loaded from the environment and a .env file."""

    model_config = {
        "env_prefix": "NOTES_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # Display defaults
    untitled_title: str = "Untitled note"
    empty_preview: str = "No content yet…"
    missing_date: str = "—"
    all_tags_sentinel: str = "all"
    datetime_format: str = "%b %d, %H:%M"

    # Remote sync (empty base URL disables it)
    api_base_url: str = ""
    api_notes_path: str = "/notes"
    api_timeout: float = 10.0

    # Local storage
    storage_path: Path = DEFAULT_STORAGE_PATH

    # MCP server
    server_host: str = "0.0.0.0"
    server_port: int = 8001
    log_level: str = "INFO"

    @property
    def sync_enabled(self) -> bool:
        """Whether a remote notes endpoint is configured."""
        return bool(self.api_base_url.strip())


settings = NotesSettings()
