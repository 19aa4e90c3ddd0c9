"""Base entity source — Abstract interface for the CMS entity service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from directories_solr.indexers.base.exceptions import DocumentBuildError
from directories_solr.models.entity import DirectoryEntity


class EntitySource(ABC):
    """Supplies the directory entities to index.

    Entities are fetched fresh on every call. The only state a source keeps
    is the list of records the last listing had to reject.
    """

    async def initialize(self) -> None:
        """Open connections. Called once before the first fetch."""

    async def shutdown(self) -> None:
        """Release connections."""

    def rejected_entities(self) -> list[DocumentBuildError]:
        """Records of the last listing that could not be read as entities."""
        return []

    @abstractmethod
    async def list_entities_without_binaries(self) -> list[DirectoryEntity]:
        """List every entity, without its binary attachments.

        Records that cannot be read are left out and reported by
        ``rejected_entities()``.

        Raises:
            EntitySourceError: If the entities cannot be fetched.
        """
