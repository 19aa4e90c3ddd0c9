"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from directories_solr import __version__
from directories_solr.api.deps import set_service
from directories_solr.api.v1.router import router as v1_router
from directories_solr.config.settings import Settings
from directories_solr.core.service import IndexingService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        yaml_path = Path("directories-solr.yaml")
        if yaml_path.exists():
            logger.info("Loading configuration from %s", yaml_path)
            settings = Settings.from_yaml(yaml_path)
        else:
            settings = Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        logger.info("Starting directories-solr v%s", __version__)

        service = IndexingService(settings)
        await service.initialize()
        set_service(service)

        app.state.settings = settings
        app.state.service = service

        logger.info("directories-solr is ready to serve requests on port %d", settings.server.port)
        yield

        logger.info("Shutting down directories-solr...")
        await service.shutdown()
        set_service(None)

    app = FastAPI(
        title="directories-solr",
        description="Indexes CMS directory entities into Solr.",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.include_router(v1_router, prefix="/v1")

    return app
