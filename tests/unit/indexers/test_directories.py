"""Tests for the directories Solr indexer."""

from __future__ import annotations

from datetime import datetime
from unittest.mock import AsyncMock

import httpx
import pytest

from directories_solr.config.settings import Settings
from directories_solr.indexers.base.exceptions import (
    ContentParsingError,
    DocumentBuildError,
    EntitySourceError,
    IndexWriteError,
)
from directories_solr.indexers.directories.content import PARSING_ERROR_MESSAGE
from directories_solr.indexers.directories.indexer import (
    DOC_INDEXATION_ERROR,
    RESOURCE_TYPE_NAMES,
    DirectoriesSolrIndexer,
    date_hierarchy,
)
from directories_solr.models.item import SolrItem
from directories_solr.sources.http import HttpEntitySource

# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def indexer(settings: Settings, mock_source: AsyncMock, mock_writer: AsyncMock) -> DirectoriesSolrIndexer:
    return DirectoriesSolrIndexer(settings, mock_source, mock_writer)


def _written(writer: AsyncMock) -> list[SolrItem]:
    writer.write.assert_awaited_once()
    return list(writer.write.await_args.args[0])


# ── Description ──────────────────────────────────────────────────────────────


class TestDescription:
    def test_static_lookups(self, indexer: DirectoriesSolrIndexer) -> None:
        assert indexer.name == "DirectoriesSolrIndexer"
        assert indexer.version == "1.0.0"
        assert indexer.description == "Solr indexer for directory entities"

    def test_enabled_follows_flag(self, indexer: DirectoriesSolrIndexer, disabled_settings: Settings) -> None:
        assert indexer.is_enabled() is True
        disabled = DirectoriesSolrIndexer(disabled_settings, AsyncMock(), AsyncMock())
        assert disabled.is_enabled() is False

    def test_resource_type_names(self, indexer: DirectoriesSolrIndexer) -> None:
        assert indexer.resource_type_names() == ("DIRECTORY_ENTITY",)
        assert indexer.resource_type_names() is RESOURCE_TYPE_NAMES

    def test_resource_uid(self, indexer: DirectoriesSolrIndexer) -> None:
        assert indexer.resource_uid("42", "DIRECTORY_ENTITY") == "42_entity"
        assert indexer.resource_uid("42", "anything") == "42_entity"

    def test_additional_fields_empty(self, indexer: DirectoriesSolrIndexer) -> None:
        assert indexer.additional_fields() == []

    async def test_get_documents_empty(self, indexer: DirectoriesSolrIndexer) -> None:
        assert await indexer.get_documents("1") == []

    def test_describe(self, indexer: DirectoriesSolrIndexer) -> None:
        desc = indexer.describe()
        assert desc.name == "DirectoriesSolrIndexer"
        assert desc.enabled is True
        assert desc.resource_types == ["DIRECTORY_ENTITY"]


# ── Item building ────────────────────────────────────────────────────────────


class TestBuildItem:
    def test_fixed_fields(self, indexer: DirectoriesSolrIndexer, entity_factory) -> None:
        item = indexer.build_item(entity_factory(7, (10, "Bakery"), title="Dupont"))
        assert item.uid == "7_entity"
        assert item.type == "directories"
        assert item.site == "lutece"
        assert item.role == "none"
        assert item.title == "Dupont"
        assert item.date == datetime(2024, 3, 7, 10, 15)

    def test_url(self, indexer: DirectoriesSolrIndexer, entity_factory) -> None:
        item = indexer.build_item(entity_factory(7))
        assert item.url == (
            "http://portal.test/lutece/jsp/site/Portal.jsp"
            "?page=directories&view=viewDirectoryEntity&entity_id=7"
        )

    def test_content_extracted(self, indexer: DirectoriesSolrIndexer, entity_factory) -> None:
        item = indexer.build_item(entity_factory(1, (10, "<p>Bakery <b>Dupont</b></p>"), (11, "Paris")))
        assert item.content == "Bakery Dupont Paris"

    def test_all_absent_values_give_empty_content(self, indexer: DirectoriesSolrIndexer, entity_factory) -> None:
        item = indexer.build_item(entity_factory(1, (10, None), (11, "null"), (12, "")))
        assert item.content == ""
        assert item.dynamic_fields == {}

    def test_no_responses(self, indexer: DirectoriesSolrIndexer, entity_factory) -> None:
        assert indexer.build_item(entity_factory(1)).content == ""

    def test_dynamic_fields(self, indexer: DirectoriesSolrIndexer, entity_factory) -> None:
        item = indexer.build_item(entity_factory(1, (10, "Bakery"), (11, "Paris"), (12, "null")))
        assert item.dynamic_fields == {"attribute10_text": "Bakery", "attribute11_text": "Paris"}

    def test_dynamic_field_merge(self, indexer: DirectoriesSolrIndexer, entity_factory) -> None:
        item = indexer.build_item(entity_factory(1, (10, "red"), (11, "x"), (10, "blue")))
        merged = item.dynamic_fields["attribute10_text"]
        assert merged == "blue red"
        assert merged.split(" ") == ["blue", "red"]
        assert item.dynamic_fields["attribute11_text"] == "x"

    def test_dynamic_field_merge_three_values(self, indexer: DirectoriesSolrIndexer, entity_factory) -> None:
        item = indexer.build_item(entity_factory(1, (10, "a"), (10, "b"), (10, "c")))
        assert item.dynamic_fields["attribute10_text"] == "c b a"

    def test_truncated_content(self, settings: Settings, entity_factory) -> None:
        settings.indexer.characters_limit = 5
        indexer = DirectoriesSolrIndexer(settings, AsyncMock(), AsyncMock())
        item = indexer.build_item(entity_factory(1, (10, "<p>abcdefghij</p>")))
        assert item.content == "abcde"

    def test_parsing_error_propagates(self, indexer: DirectoriesSolrIndexer, entity_factory, monkeypatch) -> None:
        def fail(raw: str, entity_id: int | str = "") -> str:
            raise ContentParsingError(entity_id, PARSING_ERROR_MESSAGE)

        monkeypatch.setattr(indexer.extractor, "extract", fail)
        with pytest.raises(ContentParsingError):
            indexer.build_item(entity_factory(1, (10, "x")))


class TestDateHierarchy:
    @pytest.mark.parametrize(
        ("creation", "expected"),
        [
            (datetime(2024, 1, 31), "2024/1/31"),
            (datetime(2023, 12, 5, 23, 59), "2023/12/5"),
            (datetime(2020, 2, 29), "2020/2/29"),
        ],
    )
    def test_month_is_one_based(self, entity_factory, creation: datetime, expected: str) -> None:
        assert date_hierarchy(entity_factory(1, creation=creation)) == expected

    def test_item_hie_date(self, indexer: DirectoriesSolrIndexer, entity_factory) -> None:
        item = indexer.build_item(entity_factory(1, creation=datetime(2024, 12, 1)))
        assert item.hie_date == "2024/12/1"


class TestBuildResult:
    def test_success(self, indexer: DirectoriesSolrIndexer, entity_factory) -> None:
        result = indexer.build(entity_factory(1, (10, "x")))
        assert result.ok
        assert result.item is not None
        assert result.entity_id == 1

    def test_typed_error(self, indexer: DirectoriesSolrIndexer, entity_factory, monkeypatch) -> None:
        def fail(raw: str, entity_id: int | str = "") -> str:
            raise ContentParsingError(entity_id, PARSING_ERROR_MESSAGE)

        monkeypatch.setattr(indexer.extractor, "extract", fail)
        result = indexer.build(entity_factory(1, (10, "x")))
        assert not result.ok
        assert result.item is None
        assert isinstance(result.error, ContentParsingError)

    def test_unexpected_error_is_wrapped(self, indexer: DirectoriesSolrIndexer, entity_factory, monkeypatch) -> None:
        def boom(raw: str, entity_id: int | str = "") -> str:
            raise RuntimeError("boom")

        monkeypatch.setattr(indexer.extractor, "extract", boom)
        result = indexer.build(entity_factory(5, (10, "x")))
        assert isinstance(result.error, DocumentBuildError)
        assert result.error.entity_id == 5
        assert isinstance(result.error.__cause__, RuntimeError)


# ── Indexing run ─────────────────────────────────────────────────────────────


class TestIndexDocuments:
    async def test_successful_run(self, indexer: DirectoriesSolrIndexer, mock_writer: AsyncMock) -> None:
        errors = await indexer.index_documents()
        assert errors == []
        items = _written(mock_writer)
        assert [i.uid for i in items] == ["1_entity", "2_entity", "3_entity"]
        assert items[1].content == "Florist"

    async def test_run_alias(self, indexer: DirectoriesSolrIndexer, mock_writer: AsyncMock) -> None:
        assert await indexer.run() == []
        mock_writer.write.assert_awaited_once()

    async def test_duplicates_skipped(
        self, indexer: DirectoriesSolrIndexer, mock_source: AsyncMock, mock_writer: AsyncMock, entity_factory
    ) -> None:
        mock_source.list_entities_without_binaries.return_value = [
            entity_factory(1, (10, "first"), title="First"),
            entity_factory(2, (10, "other")),
            entity_factory(1, (10, "second"), title="Second"),
        ]
        errors = await indexer.index_documents()
        assert errors == []
        items = _written(mock_writer)
        assert [i.uid for i in items] == ["1_entity", "2_entity"]
        assert items[0].title == "First"

    async def test_error_isolation(
        self, indexer: DirectoriesSolrIndexer, mock_writer: AsyncMock, monkeypatch
    ) -> None:
        extract = indexer.extractor.extract

        def fail_on_second(raw: str, entity_id: int | str = "") -> str:
            if entity_id == 2:
                raise ContentParsingError(entity_id, PARSING_ERROR_MESSAGE)
            return extract(raw, entity_id)

        monkeypatch.setattr(indexer.extractor, "extract", fail_on_second)

        errors = await indexer.index_documents()

        assert len(errors) == 1
        assert errors[0].startswith(f"{DOC_INDEXATION_ERROR}2")
        assert PARSING_ERROR_MESSAGE in errors[0]
        items = _written(mock_writer)
        assert [i.uid for i in items] == ["1_entity", "3_entity"]

    async def test_write_failure_reported_once(self, indexer: DirectoriesSolrIndexer, mock_writer: AsyncMock) -> None:
        mock_writer.write.side_effect = IndexWriteError("Solr update failed: connection refused")
        errors = await indexer.index_documents()
        assert len(errors) == 1
        assert "connection refused" in errors[0]
        mock_writer.write.assert_awaited_once()

    async def test_unexpected_write_failure_does_not_raise(
        self, indexer: DirectoriesSolrIndexer, mock_writer: AsyncMock
    ) -> None:
        mock_writer.write.side_effect = RuntimeError("disk full")
        errors = await indexer.index_documents()
        assert errors == [
            "[SolrDirectoriesIndexer] An error occured during the indexation of the documents: RuntimeError: disk full"
        ]

    async def test_source_failure(
        self, indexer: DirectoriesSolrIndexer, mock_source: AsyncMock, mock_writer: AsyncMock
    ) -> None:
        mock_source.list_entities_without_binaries.side_effect = EntitySourceError("CMS down")
        errors = await indexer.index_documents()
        assert len(errors) == 1
        assert "CMS down" in errors[0]
        mock_writer.write.assert_not_awaited()

    async def test_empty_source_writes_empty_batch(
        self, indexer: DirectoriesSolrIndexer, mock_source: AsyncMock, mock_writer: AsyncMock
    ) -> None:
        mock_source.list_entities_without_binaries.return_value = []
        assert await indexer.index_documents() == []
        assert _written(mock_writer) == []

    async def test_rejected_entities_reported(
        self, indexer: DirectoriesSolrIndexer, mock_source: AsyncMock, mock_writer: AsyncMock
    ) -> None:
        mock_source.rejected_entities.return_value = [DocumentBuildError(9, "Malformed directory entity: creation")]
        errors = await indexer.index_documents()
        assert errors == [f"{DOC_INDEXATION_ERROR}9: DocumentBuildError: Malformed directory entity: creation"]
        assert [i.uid for i in _written(mock_writer)] == ["1_entity", "2_entity", "3_entity"]

    async def test_malformed_record_does_not_sink_run(self, settings: Settings, mock_writer: AsyncMock) -> None:
        payload = [
            {"id": 1, "title": "Bakery", "creation": "2024-03-07T10:15:00Z"},
            {"id": 2, "title": None, "creation": None},
            {"id": 3, "title": None, "creation": "2024-03-08T10:15:00Z"},
        ]
        source = HttpEntitySource(
            base_url="http://cms.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=payload)),
        )
        await source.initialize()
        indexer = DirectoriesSolrIndexer(settings, source, mock_writer)

        errors = await indexer.index_documents()

        assert len(errors) == 1
        assert errors[0].startswith(f"{DOC_INDEXATION_ERROR}2: ")
        assert [i.uid for i in _written(mock_writer)] == ["1_entity", "3_entity"]
        await source.shutdown()
