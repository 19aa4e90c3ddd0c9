"""Solr indexer layer — Pluggable indexers feeding the shared Solr index.

Built-in indexers:
  - directories: directory entities of the CMS directories plugin

Implement ``SolrIndexer`` to index another kind of portal content.
"""
