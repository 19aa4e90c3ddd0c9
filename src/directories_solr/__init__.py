"""directories-solr — Solr indexer for CMS directory entities."""

__version__ = "1.0.0"
