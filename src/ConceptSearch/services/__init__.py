"""Import and query services for ConceptSearch.

Both workflows are written once against the ``SearchBackend`` protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ConceptSearch.services.importer import BatchImporter
from ConceptSearch.services.query import QueryReport, QueryRunner

if TYPE_CHECKING:
    from ConceptSearch.backends.base import SearchBackend
    from ConceptSearch.config import AppConfig


def create_importer(backend: SearchBackend) -> BatchImporter:
    """Create a batch importer using the backend's configured batch size."""
    return BatchImporter(backend=backend, batch_size=backend.batch_size)


def create_query_runner(config: AppConfig, backend: SearchBackend) -> QueryRunner:
    """Create a query runner printing ``backend.display_limit`` hits."""
    return QueryRunner(backend=backend, display_limit=config.backend.display_limit)


__all__ = [
    "BatchImporter",
    "QueryReport",
    "QueryRunner",
    "create_importer",
    "create_query_runner",
]
