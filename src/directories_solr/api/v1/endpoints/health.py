"""Health check endpoints — Service and Solr health monitoring."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from directories_solr import __version__
from directories_solr.api.deps import get_service
from directories_solr.core.service import IndexingService
from directories_solr.writers.base import WriterHealth

router = APIRouter()


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="Server version")
    service: str = Field(description="Service name ('directories-solr')")
    indexers: list[str] = Field(description="Registered indexer names")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service Health Check",
)
async def health_check(
    service: IndexingService = Depends(get_service),
) -> HealthResponse:
    """Basic health check endpoint with indexer info."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="directories-solr",
        indexers=service.registry.registered_indexers,
    )


@router.get(
    "/health/solr",
    response_model=WriterHealth,
    summary="Solr Health Check",
    description="Ping the Solr collection the indexers write to.",
)
async def solr_health(
    service: IndexingService = Depends(get_service),
) -> WriterHealth:
    return await service.writer.health_check()
