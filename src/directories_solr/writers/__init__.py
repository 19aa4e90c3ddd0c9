"""Index writers — Persist batches of Solr items."""

from directories_solr.writers.base import IndexWriter
from directories_solr.writers.solr import SolrIndexWriter

__all__ = ["IndexWriter", "SolrIndexWriter"]
