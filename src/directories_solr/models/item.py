"""Solr item model — The flat record submitted to the search index."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

DYNAMIC_TEXT_FIELD_SUFFIX = "_text"


class SchemaField(BaseModel):
    """Extra schema field an indexer may declare to the search service."""

    name: str = Field(description="Field name")
    label: str = Field(default="", description="Display label")
    description: str = Field(default="", description="Field description")
    is_facet: bool = Field(default=False, description="Whether the field is used for faceting")


class SolrItem(BaseModel):
    """A document ready to be written to Solr.

    Dynamic fields are stored under their Solr dynamic-field name, i.e. the
    logical name with the ``_text`` suffix appended.
    """

    uid: str = Field(description="Unique document identifier (resource id + type suffix)")
    type: str = Field(description="Resource type tag")
    site: str = Field(description="Site the document belongs to")
    role: str = Field(default="none", description="Role required to see the document")
    title: str = Field(default="", description="Document title")
    url: str = Field(default="", description="Source URL of the document")
    date: datetime | None = Field(default=None, description="Creation date")
    hie_date: str | None = Field(default=None, description="Date hierarchy, 'YYYY/M/D'")
    content: str = Field(default="", description="Indexable plain-text content")
    dynamic_fields: dict[str, Any] = Field(default_factory=dict, description="Dynamic field name -> value")

    def add_dynamic_field(self, name: str, value: str) -> None:
        """Add a text dynamic field, overwriting any previous value."""
        self.dynamic_fields[name + DYNAMIC_TEXT_FIELD_SUFFIX] = value

    def to_solr_document(self) -> dict[str, Any]:
        """Serialize to the flat dict accepted by Solr's JSON update handler.

        ``date`` is written as a UTC ``Z`` timestamp. A naive date is written
        unchanged, i.e. read as UTC.
        """
        doc: dict[str, Any] = {
            "uid": self.uid,
            "type": self.type,
            "site": self.site,
            "role": self.role,
            "title": self.title,
            "url": self.url,
            "content": self.content,
        }
        if self.date is not None:
            date = self.date.astimezone(UTC) if self.date.tzinfo else self.date
            doc["date"] = date.strftime("%Y-%m-%dT%H:%M:%SZ")
        if self.hie_date is not None:
            doc["hie_date"] = self.hie_date
        doc.update(self.dynamic_fields)
        return doc
