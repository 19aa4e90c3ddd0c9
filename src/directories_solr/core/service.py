"""Indexing Service — Runs the registered Solr indexers.

The service plays the part of the host portal's indexing service:
  1. Owns the shared index writer and the entity source
  2. Registers the built-in indexers
  3. Runs every enabled indexer (or a single one) and collects errors

Disabled indexers are never invoked.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from directories_solr.indexers.base.exceptions import IndexerDisabledError
from directories_solr.indexers.base.registry import IndexerRegistry
from directories_solr.indexers.directories.indexer import DirectoriesSolrIndexer
from directories_solr.sources.http import HttpEntitySource
from directories_solr.writers.solr import SolrIndexWriter

if TYPE_CHECKING:
    from directories_solr.config.settings import Settings
    from directories_solr.indexers.base.indexer import SolrIndexer
    from directories_solr.sources.base import EntitySource
    from directories_solr.writers.base import IndexWriter

logger = logging.getLogger(__name__)


class IndexingService:
    """Runs Solr indexers against the shared index writer.

    Attributes:
        settings: Application configuration.
        writer: Shared index writer.
        source: Directory entity source.
        registry: Registry of indexers.
    """

    def __init__(
        self,
        settings: Settings,
        writer: IndexWriter | None = None,
        source: EntitySource | None = None,
    ) -> None:
        self.settings = settings
        self.writer = writer or SolrIndexWriter(
            base_url=settings.solr.base_url,
            collection=settings.solr.collection,
            username=settings.solr.username,
            password=settings.solr.password,
            timeout=settings.solr.timeout,
            commit=settings.solr.commit,
            unique_key=settings.solr.unique_key,
        )
        self.source = source or HttpEntitySource(
            base_url=settings.source.base_url,
            entities_path=settings.source.entities_path,
            api_key=settings.source.api_key,
            timeout=settings.source.timeout,
        )
        self.registry = IndexerRegistry()
        self.registry.register(DirectoriesSolrIndexer(settings, self.source, self.writer))

    async def initialize(self) -> None:
        """Open the writer and source connections."""
        await self.writer.initialize()
        await self.source.initialize()

    async def shutdown(self) -> None:
        """Close the writer and source connections."""
        for component in (self.source, self.writer):
            try:
                await component.shutdown()
            except Exception:
                logger.warning("Error shutting down %s", type(component).__name__, exc_info=True)

    async def index(self, name: str) -> list[str]:
        """Run a single indexer.

        Args:
            name: The registered indexer name.

        Returns:
            Error messages reported by the indexer.

        Raises:
            IndexerNotFoundError: If no indexer has this name.
            IndexerDisabledError: If the indexer is disabled.
        """
        indexer = self.registry.get(name)
        if not indexer.is_enabled():
            raise IndexerDisabledError(f"Indexer '{name}' is disabled.")
        return await self._run(indexer)

    async def index_all(self) -> dict[str, list[str]]:
        """Run every enabled indexer, in registration order.

        Returns:
            Mapping of indexer name to the error messages it reported.
        """
        results: dict[str, list[str]] = {}
        for indexer in self.registry.indexers:
            if not indexer.is_enabled():
                logger.info("Indexer '%s' is disabled, skipping", indexer.name)
                continue
            results[indexer.name] = await self._run(indexer)
        return results

    @staticmethod
    async def _run(indexer: SolrIndexer) -> list[str]:
        name = indexer.name
        start = time.monotonic()
        logger.info("Starting indexer '%s'", name)
        errors = await indexer.index_documents()
        elapsed_ms = int((time.monotonic() - start) * 1000)
        if errors:
            logger.warning("Indexer '%s' finished with %d errors in %d ms", name, len(errors), elapsed_ms)
        else:
            logger.info("Indexer '%s' finished in %d ms", name, elapsed_ms)
        return errors
