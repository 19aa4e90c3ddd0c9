"""Base indexer interface — Abstract classes for Solr indexers."""

from directories_solr.indexers.base.indexer import BuildResult, IndexerDescription, SolrIndexer
from directories_solr.indexers.base.registry import IndexerRegistry

__all__ = ["BuildResult", "IndexerDescription", "IndexerRegistry", "SolrIndexer"]
