"""Pydantic models for notes and the values derived from searching them."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Note(BaseModel):
    """A single note with tags and ISO-8601 timestamps.

    Accepts both ``created_at`` and the wire name ``createdAt`` (likewise for
    ``updated_at``); ``model_dump(by_alias=True)`` emits the wire names.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Opaque unique identifier")
    title: str = Field(default="", description="Display title")
    body: str = Field(default="", description="Free-form note text")
    tags: list[str] = Field(default_factory=list, description="Ordered tag names")
    created_at: Optional[str] = Field(
        default=None,
        alias="createdAt",
        validation_alias=AliasChoices("createdAt", "created_at"),
        description="ISO-8601 creation timestamp",
    )
    updated_at: Optional[str] = Field(
        default=None,
        alias="updatedAt",
        validation_alias=AliasChoices("updatedAt", "updated_at"),
        description="ISO-8601 last update timestamp",
    )

    @field_validator("title", "body", mode="before")
    @classmethod
    def _null_text_is_empty(cls, value):
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags_are_empty(cls, value):
        return [] if value is None else value

    def to_wire(self) -> dict:
        """Record shape exchanged with storage and the remote API."""
        return self.model_dump(by_alias=True)


class NoteStore(BaseModel):
    """Container for all notes, used for JSON serialization."""

    notes: list[Note] = Field(default_factory=list)


class ParsedQuery(BaseModel):
    """Search input split into free text and an optional ``tag:`` filter."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    tag: Optional[str] = None


class HighlightSegment(BaseModel):
    """A run of text flagged as matching the search needle or not."""

    model_config = ConfigDict(frozen=True)

    text: str
    highlight: bool = False


class SaveState(str, Enum):
    """Persistence indicator for the note being edited."""

    SAVED = "saved"
    DIRTY = "dirty"
    SAVING = "saving"
    ERROR = "error"
