"""API v1 Router — Indexer and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from directories_solr.api.v1.endpoints.health import router as health_router
from directories_solr.api.v1.endpoints.indexers import router as indexers_router

router = APIRouter(tags=["v1"])
router.include_router(indexers_router)
router.include_router(health_router)
