"""Search backends for ConceptSearch.

Each backend adapts one search library or service to the ``SearchBackend``
protocol; the import and query workflows are written once against it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ConceptSearch.backends.base import BackendError, SearchBackend
from ConceptSearch.backends.registry import build_backend, supported_backend_names

if TYPE_CHECKING:
    from ConceptSearch.config import AppConfig


def create_backend(config: AppConfig) -> SearchBackend:
    """Create the backend selected by ``backend.name``."""
    return build_backend(config.backend.name, config=config)


__all__ = [
    "BackendError",
    "SearchBackend",
    "build_backend",
    "create_backend",
    "supported_backend_names",
]
