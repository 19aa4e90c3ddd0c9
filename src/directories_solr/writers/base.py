"""Base index writer — Abstract interface for the shared index writing service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Collection

from pydantic import BaseModel, Field

from directories_solr.models.item import SolrItem


class WriterHealth(BaseModel):
    """Health status of an index writer backend."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class IndexWriter(ABC):
    """Writes batches of items to the search index."""

    async def initialize(self) -> None:
        """Open connections. Called once before the first write."""

    async def shutdown(self) -> None:
        """Release connections."""

    @abstractmethod
    async def write(self, items: Collection[SolrItem]) -> None:
        """Write a batch of items in one call.

        Raises:
            IndexWriteError: If the batch could not be written.
        """

    @abstractmethod
    async def health_check(self) -> WriterHealth:
        """Check the health of the index backend."""
