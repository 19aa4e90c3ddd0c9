"""Apache Solr writer — Batch document updates via Solr's JSON update handler.

Connects to Apache Solr (v8+) using ``httpx`` (async) and posts documents
as a JSON array to ``/{collection}/update``.

Usage::

    writer = SolrIndexWriter(
        base_url="http://localhost:8983/solr",
        collection="lutece",
    )
    await writer.initialize()
    await writer.write(items)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Collection
from datetime import UTC, datetime
from typing import Any

import httpx

from directories_solr.indexers.base.exceptions import IndexWriteError
from directories_solr.models.item import SolrItem
from directories_solr.writers.base import IndexWriter, WriterHealth

logger = logging.getLogger(__name__)


class SolrIndexWriter(IndexWriter):
    """Index writer for Apache Solr (v8+).

    Args:
        base_url: Solr base URL, e.g. ``"http://localhost:8983/solr"``.
        collection: Solr collection/core receiving the documents.
        username: Optional basic-auth username.
        password: Optional basic-auth password.
        timeout: HTTP request timeout in seconds.
        commit: Ask Solr for a hard commit with every batch.
        unique_key: uniqueKey field of the collection. The item uid is copied
            to it when the schema does not key documents on ``uid``.
        transport: Optional ``httpx`` transport (used by tests).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8983/solr",
        collection: str = "lutece",
        username: str | None = None,
        password: str | None = None,
        timeout: float = 30.0,
        commit: bool = True,
        unique_key: str = "uid",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._collection = collection
        self._username = username
        self._password = password
        self._timeout = timeout
        self._commit = commit
        self._unique_key = unique_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def collection(self) -> str:
        return self._collection

    async def initialize(self) -> None:
        """Create the ``httpx.AsyncClient`` used for updates."""
        if self._client is not None:
            return

        auth = None
        if self._username and self._password:
            auth = httpx.BasicAuth(self._username, self._password)

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            auth=auth,
            transport=self._transport,
        )
        logger.info("Solr writer ready for collection '%s' at %s", self._collection, self._base_url)

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── Write ────────────────────────────────────────────────────────────

    async def write(self, items: Collection[SolrItem]) -> None:
        """Post all items to Solr in a single update request."""
        if not self._client:
            raise IndexWriteError("Solr client not initialized.")

        if not items:
            logger.debug("Nothing to write to Solr collection '%s'", self._collection)
            return

        docs = [item.to_solr_document() for item in items]
        if self._unique_key != "uid":
            for doc in docs:
                doc[self._unique_key] = doc["uid"]
        params: dict[str, Any] = {"wt": "json"}
        if self._commit:
            params["commit"] = "true"

        try:
            start = time.monotonic()
            resp = await self._client.post(
                f"/{self._collection}/update",
                json=docs,
                params=params,
            )
            took_ms = int((time.monotonic() - start) * 1000)
        except httpx.HTTPError as e:
            raise IndexWriteError(f"Solr update failed: {e}") from e

        if resp.status_code >= 400:
            raise IndexWriteError(
                f"Solr update failed with HTTP {resp.status_code}: {self._error_message(resp)}"
            )

        logger.info(
            "Wrote %d documents to Solr collection '%s' in %d ms",
            len(docs),
            self._collection,
            took_ms,
        )

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> WriterHealth:
        """Ping the Solr admin endpoint."""
        if not self._client:
            return WriterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            resp = await self._client.get(f"/{self._collection}/admin/ping")
            latency_ms = int((time.monotonic() - start) * 1000)

            if resp.status_code == 200:
                data = resp.json()
                solr_status = data.get("status", "unknown")
                return WriterHealth(
                    status="healthy" if solr_status == "OK" else "degraded",
                    latency_ms=latency_ms,
                    last_check=datetime.now(UTC).isoformat(),
                    message=f"Collection: {self._collection}, status: {solr_status}",
                )
            return WriterHealth(
                status="degraded",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Solr returned HTTP {resp.status_code}",
            )
        except Exception as e:
            return WriterHealth(status="unhealthy", message=str(e))

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        """Pull ``error.msg`` out of a Solr error body, falling back to raw text."""
        try:
            data = resp.json()
        except ValueError:
            return resp.text[:500]
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("msg"):
                return str(error["msg"])
        return resp.text[:500]
