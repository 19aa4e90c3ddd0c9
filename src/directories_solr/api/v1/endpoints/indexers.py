"""Indexer endpoints — List indexers and trigger indexing runs."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from directories_solr.api.deps import get_service
from directories_solr.core.service import IndexingService
from directories_solr.indexers.base.exceptions import IndexerDisabledError
from directories_solr.indexers.base.indexer import IndexerDescription
from directories_solr.indexers.base.registry import IndexerNotFoundError

router = APIRouter()


class IndexRunResponse(BaseModel):
    """Outcome of one indexing run."""

    indexer: str = Field(description="Indexer name")
    status: str = Field(description="'completed' or 'completed_with_errors'")
    errors: list[str] = Field(default_factory=list, description="Error messages reported by the run")
    processing_time_ms: int = Field(default=0, description="Run duration in ms")


@router.get(
    "/indexers",
    response_model=list[IndexerDescription],
    summary="List Indexers",
)
async def list_indexers(
    service: IndexingService = Depends(get_service),
) -> list[IndexerDescription]:
    return service.registry.describe_all()


@router.post(
    "/indexers/{name}/run",
    response_model=IndexRunResponse,
    summary="Run Indexer",
    description=(
        "Run a full indexing pass of one indexer. Document-level failures do not "
        "fail the request; they are returned in ``errors``."
    ),
)
async def run_indexer(
    name: str,
    service: IndexingService = Depends(get_service),
) -> IndexRunResponse:
    start = time.monotonic()
    try:
        errors = await service.index(name)
    except IndexerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except IndexerDisabledError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    return IndexRunResponse(
        indexer=name,
        status="completed_with_errors" if errors else "completed",
        errors=errors,
        processing_time_ms=int((time.monotonic() - start) * 1000),
    )
