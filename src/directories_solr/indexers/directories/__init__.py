"""Directory entity indexer."""

from directories_solr.indexers.directories.indexer import DirectoriesSolrIndexer

__all__ = ["DirectoriesSolrIndexer"]
