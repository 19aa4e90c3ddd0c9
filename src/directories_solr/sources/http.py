"""HTTP entity source — Reads directory entities from the CMS REST export.

The endpoint is expected to return either a JSON array of entities or an
object with an ``entities`` array. Each entity looks like::

    {
        "id": 42,
        "title": "Bakery on Main Street",
        "creation": "2024-03-07T10:15:00Z",
        "responses": [
            {"response_value": "<p>Open on sundays</p>", "entry": {"id_entry": 7}}
        ]
    }
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from directories_solr.indexers.base.exceptions import ConfigurationError, DocumentBuildError, EntitySourceError
from directories_solr.models.entity import DirectoryEntity
from directories_solr.sources.base import EntitySource

logger = logging.getLogger(__name__)


class HttpEntitySource(EntitySource):
    """Entity source backed by the CMS REST API.

    Args:
        base_url: CMS REST API base URL.
        entities_path: Path of the entity listing.
        api_key: Optional bearer token.
        timeout: HTTP request timeout in seconds.
        transport: Optional ``httpx`` transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        entities_path: str = "/rest/directories/entities",
        api_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._entities_path = "/" + entities_path.lstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._rejected: list[DocumentBuildError] = []

    async def initialize(self) -> None:
        if self._client is not None:
            return
        if not self._base_url:
            raise ConfigurationError("Entity source base URL is not configured.")
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers=headers,
            transport=self._transport,
        )

    async def shutdown(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def list_entities_without_binaries(self) -> list[DirectoryEntity]:
        if not self._client:
            raise EntitySourceError("Entity source client not initialized.")
        self._rejected = []

        try:
            resp = await self._client.get(self._entities_path, params={"binaries": "false"})
            resp.raise_for_status()
            payload: Any = resp.json()
        except httpx.HTTPError as e:
            raise EntitySourceError(f"Failed to fetch directory entities: {e}") from e
        except ValueError as e:
            raise EntitySourceError(f"Invalid JSON in entity listing: {e}") from e

        if isinstance(payload, dict):
            if not isinstance(payload.get("entities"), list):
                raise EntitySourceError(
                    f"Malformed entity listing: expected an 'entities' array, got keys {sorted(payload)}"
                )
            payload = payload["entities"]
        elif not isinstance(payload, list):
            raise EntitySourceError(f"Malformed entity listing: expected an array, got {type(payload).__name__}")

        entities: list[DirectoryEntity] = []
        for position, raw in enumerate(payload):
            try:
                entities.append(DirectoryEntity.model_validate(raw))
            except ValidationError as e:
                entity_id = raw.get("id", f"#{position}") if isinstance(raw, dict) else f"#{position}"
                logger.warning("Skipping malformed directory entity %s", entity_id)
                self._rejected.append(DocumentBuildError(entity_id, f"Malformed directory entity: {e}"))

        logger.debug(
            "Fetched %d directory entities from %s (%d rejected)",
            len(entities),
            self._base_url,
            len(self._rejected),
        )
        return entities

    def rejected_entities(self) -> list[DocumentBuildError]:
        return list(self._rejected)
