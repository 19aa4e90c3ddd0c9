"""Integration test fixtures — A running Solr instance.

Expects Solr to be reachable at ``$SOLR_URL`` (default
``http://localhost:8983/solr``) with a ``documents`` collection, e.g.:
    docker run -d -p 8983:8983 solr:9 solr-precreate documents

Tests are skipped when Solr is not available.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import time

import httpx
import pytest

SOLR_URL = os.environ.get("SOLR_URL", "http://localhost:8983/solr")
SOLR_COLLECTION = "documents"


def _wait_for_service(url: str, timeout: float = 5.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=5)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(1)
    return False


async def _prepare_solr(host: str, collection: str) -> None:
    async with httpx.AsyncClient(base_url=host, timeout=30) as client:
        # Explicit fields for the index document schema; dynamic *_text fields
        # are covered by Solr's default configset.
        for field in [
            {"name": "uid", "type": "string", "stored": True},
            {"name": "type", "type": "string", "stored": True},
            {"name": "site", "type": "string", "stored": True},
            {"name": "role", "type": "string", "stored": True},
            {"name": "title", "type": "text_general", "stored": True},
            {"name": "url", "type": "string", "stored": True},
            {"name": "content", "type": "text_general", "stored": True},
            {"name": "date", "type": "pdate", "stored": True},
            {"name": "hie_date", "type": "string", "stored": True},
        ]:
            with contextlib.suppress(httpx.HTTPError):
                await client.post(f"/{collection}/schema", json={"add-field": field})

        await client.post(
            f"/{collection}/update",
            json={"delete": {"query": "type:directories"}},
            params={"commit": "true"},
        )


@pytest.fixture(scope="session")
def solr_ready() -> str:
    """Ensure Solr is running and the test collection is clean."""
    if not _wait_for_service(f"{SOLR_URL}/{SOLR_COLLECTION}/admin/ping"):
        pytest.skip(f"Solr not available at {SOLR_URL}")
    asyncio.run(_prepare_solr(SOLR_URL, SOLR_COLLECTION))
    return SOLR_URL
