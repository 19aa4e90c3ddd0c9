"""Indexer Registry — Manages registration and retrieval of Solr indexers.

The registry is the central place where the indexing service looks up the
indexers plugged into the portal.
"""

from __future__ import annotations

import logging

from directories_solr.indexers.base.indexer import IndexerDescription, SolrIndexer

logger = logging.getLogger(__name__)


class IndexerNotFoundError(Exception):
    """Raised when a requested indexer is not registered."""


class IndexerRegistry:
    """Registry of Solr indexer instances, keyed by indexer name.

    Example:
        >>> registry = IndexerRegistry()
        >>> registry.register(DirectoriesSolrIndexer(settings, source, writer))
        >>> indexer = registry.get("DirectoriesSolrIndexer")
    """

    def __init__(self) -> None:
        self._indexers: dict[str, SolrIndexer] = {}

    def register(self, indexer: SolrIndexer) -> None:
        """Register an indexer under its own name.

        Args:
            indexer: The indexer to register.
        """
        name = indexer.name
        if name in self._indexers:
            logger.warning("Overwriting existing indexer registration: %s", name)
        self._indexers[name] = indexer
        logger.info("Registered indexer: %s", name)

    def get(self, name: str) -> SolrIndexer:
        """Get a registered indexer by name.

        Raises:
            IndexerNotFoundError: If no indexer is registered under this name.
        """
        if name not in self._indexers:
            raise IndexerNotFoundError(
                f"No indexer registered with name '{name}'. "
                f"Available indexers: {list(self._indexers.keys())}"
            )
        return self._indexers[name]

    def describe_all(self) -> list[IndexerDescription]:
        """Describe every registered indexer, in registration order."""
        return [indexer.describe() for indexer in self._indexers.values()]

    @property
    def indexers(self) -> list[SolrIndexer]:
        """All registered indexers."""
        return list(self._indexers.values())

    @property
    def enabled_indexers(self) -> list[SolrIndexer]:
        """Registered indexers whose enable flag is set."""
        return [indexer for indexer in self._indexers.values() if indexer.is_enabled()]

    @property
    def registered_indexers(self) -> list[str]:
        """List all registered indexer names."""
        return list(self._indexers.keys())
