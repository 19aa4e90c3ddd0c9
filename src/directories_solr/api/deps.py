"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from directories_solr.core.service import IndexingService

# Global service instance (set during application lifespan)
_service: IndexingService | None = None


def set_service(service: IndexingService | None) -> None:
    """Set the global indexing service (called during app lifespan)."""
    global _service
    _service = service


def get_service() -> IndexingService:
    """Get the global indexing service.

    Raises:
        RuntimeError: If the service is not initialized.
    """
    if _service is None:
        raise RuntimeError("Indexing service not initialized. Is the server running?")
    return _service
