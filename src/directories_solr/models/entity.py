"""Directory entity models — Records read from the CMS directories plugin."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

NULL_VALUE = "null"


class Entry(BaseModel):
    """Attribute definition a response answers (a form question)."""

    id_entry: int = Field(description="Attribute definition identifier")
    title: str | None = Field(default=None, description="Attribute label")


class Response(BaseModel):
    """One answered attribute of a directory entity."""

    response_value: str | None = Field(default=None, description="Raw attribute value, possibly HTML")
    entry: Entry = Field(description="Attribute definition")

    @property
    def has_value(self) -> bool:
        """Whether the response carries a value (the literal ``"null"`` counts as absent)."""
        return bool(self.response_value) and self.response_value != NULL_VALUE


class DirectoryEntity(BaseModel):
    """A directory entity without its binary attachments."""

    id: int = Field(description="Entity identifier")
    title: str = Field(default="", description="Entity title")
    creation: datetime = Field(description="Creation timestamp, UTC when naive")
    responses: list[Response] = Field(default_factory=list, description="Answered attributes, in order")

    @field_validator("title", mode="before")
    @classmethod
    def _null_title(cls, v: Any) -> Any:
        """The CMS sends untitled entities with a null title."""
        return "" if v is None else v
