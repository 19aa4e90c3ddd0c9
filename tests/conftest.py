"""Shared test fixtures and configuration."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock

import pytest

from directories_solr.config.settings import Settings
from directories_solr.models.entity import DirectoryEntity, Entry, Response
from directories_solr.sources.base import EntitySource
from directories_solr.writers.base import IndexWriter, WriterHealth


def _make_entity(entity_id: int, *values: tuple[int, str | None], **kwargs: Any) -> DirectoryEntity:
    """Build an entity whose responses are ``(entry id, value)`` pairs."""
    return DirectoryEntity(
        id=entity_id,
        title=kwargs.pop("title", f"Entity {entity_id}"),
        creation=kwargs.pop("creation", datetime(2024, 3, 7, 10, 15)),
        responses=[Response(response_value=value, entry=Entry(id_entry=entry_id)) for entry_id, value in values],
        **kwargs,
    )


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with the indexer enabled."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        indexer={"enabled": True},
        portal={"base_url": "http://portal.test/lutece/", "webapp_name": "lutece"},
        source={"base_url": "http://cms.test"},
    )


@pytest.fixture
def disabled_settings() -> Settings:
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        indexer={"enabled": False},
        source={"base_url": "http://cms.test"},
    )


@pytest.fixture
def sample_entities() -> list[DirectoryEntity]:
    """Three entities with HTML answers."""
    return [
        _make_entity(1, (10, "<p>Bakery <b>Dupont</b></p>"), (11, "Paris")),
        _make_entity(2, (10, "<div>Florist</div>"), (11, "null")),
        _make_entity(3, (10, "Butcher"), (12, None)),
    ]


@pytest.fixture
def mock_writer() -> AsyncMock:
    writer = AsyncMock(spec=IndexWriter)
    writer.health_check.return_value = WriterHealth(status="healthy", message="Collection: lutece, status: OK")
    return writer


@pytest.fixture
def mock_source(sample_entities: list[DirectoryEntity]) -> AsyncMock:
    source = AsyncMock(spec=EntitySource)
    source.list_entities_without_binaries.return_value = sample_entities
    source.rejected_entities.return_value = []
    return source


@pytest.fixture
def entity_factory():
    """Factory building entities from ``(entry id, value)`` pairs."""
    return _make_entity
