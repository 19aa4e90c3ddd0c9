"""Entity sources — Supply directory entities to the indexer."""

from directories_solr.sources.base import EntitySource
from directories_solr.sources.http import HttpEntitySource

__all__ = ["EntitySource", "HttpEntitySource"]
