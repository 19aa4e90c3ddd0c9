"""Base Solr indexer — Abstract interface for all portal content indexers.

Every indexer plugged into the indexing service implements this interface.
An indexer is responsible for:
  1. Reporting whether it is enabled
  2. Enumerating its content and building index documents
  3. Handing the batch to the shared index writer
  4. Describing itself and the resource types it covers
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from directories_solr.indexers.base.exceptions import DocumentBuildError
from directories_solr.models.item import SchemaField, SolrItem


class IndexerDescription(BaseModel):
    """Static description of an indexer."""

    name: str = Field(description="Indexer name")
    version: str = Field(description="Indexer version")
    description: str = Field(description="Human readable description")
    enabled: bool = Field(description="Whether the indexer is enabled")
    resource_types: list[str] = Field(default_factory=list, description="Resource types covered")


class BuildResult(BaseModel):
    """Outcome of building one index document: either an item or an error."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    entity_id: Any = Field(description="Identifier of the source entity")
    item: SolrItem | None = Field(default=None, description="The built document")
    error: DocumentBuildError | None = Field(default=None, description="Why the build failed")

    @property
    def ok(self) -> bool:
        return self.error is None


class SolrIndexer(ABC):
    """Abstract base class for Solr indexers.

    All indexers must implement:
      - is_enabled(): Read the enable flag
      - index_documents(): Run a full indexing pass and return error messages
      - name / version / description: Static configuration lookups
      - resource_type_names(): Resource types this indexer covers
      - resource_uid(): Build the Solr uid of a resource

    ``index_documents()`` never raises; failures are returned as messages.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Indexer name."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Indexer version."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human readable description."""

    @abstractmethod
    def is_enabled(self) -> bool:
        """Whether the indexer should be run by the indexing service."""

    @abstractmethod
    async def index_documents(self) -> list[str]:
        """Index every document handled by this indexer.

        Returns:
            Error messages collected during the run (empty on full success).
        """

    @abstractmethod
    def resource_type_names(self) -> tuple[str, ...]:
        """Resource type names covered by this indexer."""

    @abstractmethod
    def resource_uid(self, resource_id: str, resource_type: str) -> str:
        """Build the unique Solr identifier of a resource.

        Args:
            resource_id: The resource identifier in the portal.
            resource_type: The resource type name.

        Returns:
            The uid stored in the index.
        """

    def additional_fields(self) -> list[SchemaField]:
        """Extra schema fields declared by this indexer (none by default)."""
        return []

    async def get_documents(self, document_id: str) -> list[SolrItem]:
        """Build the documents of a single resource for incremental indexing.

        Not supported by default; returns an empty list.
        """
        return []

    async def run(self) -> list[str]:
        """Alias of ``index_documents()``."""
        return await self.index_documents()

    def describe(self) -> IndexerDescription:
        """Collect the static description of this indexer."""
        return IndexerDescription(
            name=self.name,
            version=self.version,
            description=self.description,
            enabled=self.is_enabled(),
            resource_types=list(self.resource_type_names()),
        )
