"""Indexer-specific exceptions."""

from __future__ import annotations


class IndexerError(Exception):
    """Base exception for indexer errors."""


class DocumentBuildError(IndexerError):
    """Raised when a single index document cannot be built.

    Attributes:
        entity_id: Identifier of the entity that failed.
    """

    def __init__(self, entity_id: int | str, message: str) -> None:
        super().__init__(message)
        self.entity_id = entity_id


class ContentParsingError(DocumentBuildError):
    """Raised when the HTML content of an entity cannot be parsed."""


class IndexWriteError(IndexerError):
    """Raised when a batch of documents cannot be written to the index."""


class EntitySourceError(IndexerError):
    """Raised when entities cannot be fetched from the CMS."""


class ConfigurationError(IndexerError):
    """Raised when indexer configuration is invalid."""


class IndexerDisabledError(IndexerError):
    """Raised when a disabled indexer is asked to run."""


def build_error_message(exc: BaseException) -> str:
    """Format an exception as the error string reported for an indexing run."""
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__
