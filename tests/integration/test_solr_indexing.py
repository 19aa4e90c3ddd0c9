"""Integration tests for the directories indexer against a real Solr instance."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest

from directories_solr.config.settings import Settings
from directories_solr.indexers.directories.indexer import DirectoriesSolrIndexer
from directories_solr.sources.base import EntitySource
from directories_solr.writers.solr import SolrIndexWriter

pytestmark = [pytest.mark.integration, pytest.mark.solr]


@pytest.fixture
async def writer(solr_ready: str):
    w = SolrIndexWriter(base_url=solr_ready, collection="documents", unique_key="id")
    await w.initialize()
    yield w
    await w.shutdown()


class TestSolrWriterHealth:
    async def test_health_check_returns_healthy(self, writer: SolrIndexWriter) -> None:
        health = await writer.health_check()
        assert health.status == "healthy"
        assert health.latency_ms >= 0


class TestDirectoriesIndexing:
    async def test_run_writes_documents(
        self, writer: SolrIndexWriter, solr_ready: str, settings: Settings, sample_entities
    ) -> None:
        source = AsyncMock(spec=EntitySource)
        source.list_entities_without_binaries.return_value = sample_entities
        source.rejected_entities.return_value = []
        indexer = DirectoriesSolrIndexer(settings, source, writer)

        errors = await indexer.index_documents()
        assert errors == []

        async with httpx.AsyncClient(base_url=solr_ready, timeout=30) as client:
            resp = await client.get(
                "/documents/select",
                params={"q": "type:directories", "fl": "uid,hie_date,content", "sort": "uid asc"},
            )
            resp.raise_for_status()
            docs = resp.json()["response"]["docs"]

        assert [d["uid"] for d in docs] == ["1_entity", "2_entity", "3_entity"]
        assert docs[0]["hie_date"] == "2024/3/7"
