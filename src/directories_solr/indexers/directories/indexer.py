"""Directories Solr indexer — Indexes directory entities into the shared Solr index.

Every entity becomes one ``SolrItem``:
  - uid ``<entity id>_entity`` and type ``directories``
  - a link to the front-office entity view
  - a ``YYYY/M/D`` date hierarchy built from the creation date
  - one ``attribute<entry id>`` dynamic field per answered attribute
  - the plain text of all answers as content
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from directories_solr.config.settings import (
    PROPERTY_DESCRIPTION,
    PROPERTY_DOCUMENT_MAX_CHARS,
    PROPERTY_INDEXER_ENABLE,
    PROPERTY_NAME,
    PROPERTY_VERSION,
    Settings,
)
from directories_solr.indexers.base.exceptions import DocumentBuildError, build_error_message
from directories_solr.indexers.base.indexer import BuildResult, SolrIndexer
from directories_solr.indexers.directories.content import HtmlContentExtractor, concatenate_values
from directories_solr.models.entity import DirectoryEntity
from directories_solr.models.item import DYNAMIC_TEXT_FIELD_SUFFIX, SolrItem
from directories_solr.sources.base import EntitySource
from directories_solr.writers.base import IndexWriter

logger = logging.getLogger(__name__)

TYPE = "directories"
SHORT_NAME = "entity"
CONSTANT_TYPE_RESOURCE = "DIRECTORY_ENTITY"
ROLE_NONE = "none"

PARAMETER_XPAGE = "page"
XPAGE_DIRECTORIES = "directories"
PARAMETER_VIEW = "view"
PARAMETER_VIEW_ENTITY = "viewDirectoryEntity"
PARAMETER_ENTITY_ID = "entity_id"

DYNAMIC_FIELD_PREFIX = "attribute"

DOC_INDEXATION_ERROR = "[SolrDirectoriesIndexer] An error occured during the indexation of the document number "
BATCH_INDEXATION_ERROR = "[SolrDirectoriesIndexer] An error occured during the indexation of the documents"


def _resource_type_names() -> tuple[str, ...]:
    return (CONSTANT_TYPE_RESOURCE,)


RESOURCE_TYPE_NAMES = _resource_type_names()


def date_hierarchy(entity: DirectoryEntity) -> str:
    """``year/month/day`` of the creation date, month 1-12, no zero padding."""
    creation = entity.creation
    return f"{creation.year}/{creation.month}/{creation.day}"


def merge_dynamic_field(item: SolrItem, field_name: str, value: str) -> str:
    """Value to store for ``field_name``, merged with its current ``_text`` value.

    When ``item`` already holds ``<field_name>_text``, the existing value is
    appended after the new one, separated by a space.
    """
    existing = item.dynamic_fields.get(field_name + DYNAMIC_TEXT_FIELD_SUFFIX)
    if existing is not None:
        return f"{value} {existing}"
    return value


class DirectoriesSolrIndexer(SolrIndexer):
    """Solr indexer for the entities of the directories plugin.

    Args:
        settings: Application settings.
        source: Service listing the directory entities.
        writer: Shared index writer receiving the batch.
    """

    def __init__(self, settings: Settings, source: EntitySource, writer: IndexWriter) -> None:
        self.settings = settings
        self.source = source
        self.writer = writer
        self.extractor = HtmlContentExtractor(max_chars=settings.get_property(PROPERTY_DOCUMENT_MAX_CHARS))

    # ── Description ──────────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self.settings.get_property(PROPERTY_NAME)

    @property
    def version(self) -> str:
        return self.settings.get_property(PROPERTY_VERSION)

    @property
    def description(self) -> str:
        return self.settings.get_property(PROPERTY_DESCRIPTION)

    def is_enabled(self) -> bool:
        return bool(self.settings.get_property(PROPERTY_INDEXER_ENABLE))

    def resource_type_names(self) -> tuple[str, ...]:
        return RESOURCE_TYPE_NAMES

    def resource_uid(self, resource_id: str, resource_type: str) -> str:
        return f"{resource_id}_{SHORT_NAME}"

    # ── Indexing ─────────────────────────────────────────────────────────

    async def index_documents(self) -> list[str]:
        """Build one item per distinct entity and write them in a single batch."""
        errors: list[str] = []

        try:
            entities = await self.source.list_entities_without_binaries()
        except Exception as e:
            logger.error("%s: entity listing failed", BATCH_INDEXATION_ERROR, exc_info=True)
            return [f"{BATCH_INDEXATION_ERROR}: {build_error_message(e)}"]

        logger.info("Indexing %d directory entities", len(entities))
        for rejected in self.source.rejected_entities():
            self._record_document_error(errors, rejected)

        indexed_ids: set[int] = set()
        items: list[SolrItem] = []
        for entity in entities:
            if entity.id in indexed_ids:
                continue

            result = self.build(entity)
            if result.ok and result.item is not None:
                items.append(result.item)
                indexed_ids.add(entity.id)
            elif result.error is not None:
                self._record_document_error(errors, result.error)

        try:
            await self.writer.write(items)
        except Exception as e:
            errors.append(f"{BATCH_INDEXATION_ERROR}: {build_error_message(e)}")
            logger.error(BATCH_INDEXATION_ERROR, exc_info=True)

        logger.info("Directory indexing finished: %d documents built, %d errors", len(items), len(errors))
        return errors

    def build(self, entity: DirectoryEntity) -> BuildResult:
        """Build the item of ``entity``, capturing any failure as a typed error."""
        try:
            return BuildResult(entity_id=entity.id, item=self.build_item(entity))
        except DocumentBuildError as e:
            return BuildResult(entity_id=entity.id, error=e)
        except Exception as e:
            error = DocumentBuildError(entity.id, str(e) or type(e).__name__).with_traceback(e.__traceback__)
            error.__cause__ = e
            return BuildResult(entity_id=entity.id, error=error)

    @staticmethod
    def _record_document_error(errors: list[str], error: DocumentBuildError) -> None:
        errors.append(f"{DOC_INDEXATION_ERROR}{error.entity_id}: {build_error_message(error)}")
        logger.error(
            "%s%s",
            DOC_INDEXATION_ERROR,
            error.entity_id,
            exc_info=(type(error), error, error.__traceback__),
        )

    def build_item(self, entity: DirectoryEntity) -> SolrItem:
        """Build the Solr item of a single entity.

        Raises:
            DocumentBuildError: If the item cannot be built.
        """
        item = SolrItem(
            uid=self.resource_uid(str(entity.id), CONSTANT_TYPE_RESOURCE),
            type=TYPE,
            site=self.settings.portal.webapp_name,
            role=ROLE_NONE,
            title=entity.title,
            url=self.entity_url(entity.id),
            date=entity.creation,
            hie_date=date_hierarchy(entity),
        )
        raw_content = self._content_to_index(entity, item)
        item.content = self.extractor.extract(raw_content, entity.id)
        return item

    def entity_url(self, entity_id: int) -> str:
        """Front-office URL showing the entity."""
        base = self.settings.portal.portal_url
        query = urlencode(
            [
                (PARAMETER_XPAGE, XPAGE_DIRECTORIES),
                (PARAMETER_VIEW, PARAMETER_VIEW_ENTITY),
                (PARAMETER_ENTITY_ID, entity_id),
            ]
        )
        separator = "&" if "?" in base else "?"
        return f"{base}{separator}{query}"

    @staticmethod
    def _content_to_index(entity: DirectoryEntity, item: SolrItem) -> str:
        """Concatenate the answered values and fill the dynamic fields of ``item``."""
        values: list[str] = []
        for response in entity.responses:
            if not response.has_value:
                continue
            value = response.response_value or ""
            values.append(value)
            field_name = f"{DYNAMIC_FIELD_PREFIX}{response.entry.id_entry}"
            item.add_dynamic_field(field_name, merge_dynamic_field(item, field_name, value))
        return concatenate_values(values)
