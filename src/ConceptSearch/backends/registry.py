"""Backend registry and builders."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ConceptSearch.backends.base import SearchBackend
    from ConceptSearch.config import AppConfig

BackendBuilder = Callable[["AppConfig"], "SearchBackend"]


def build_backend(backend_name: str, *, config: AppConfig) -> SearchBackend:
    """Build a backend instance from the registered backend name.

    Args:
        backend_name: Backend identifier from ``backend.name``.
        config: Parsed application configuration.

    Returns:
        SearchBackend: Initialized backend for the given name.

    Raises:
        ValueError: If ``backend_name`` is not registered.
    """
    builder = _backend_builders().get(backend_name)
    if builder is None:
        raise ValueError(f"Unsupported backend in config.backend.name: {backend_name}")
    return builder(config)


def supported_backend_names() -> tuple[str, ...]:
    """Return all backend names that can be built by the registry."""
    return tuple(_backend_builders().keys())


def _backend_builders() -> dict[str, BackendBuilder]:
    return {
        "local": _build_local_backend,
        "typesense": _build_typesense_backend,
        "meilisearch": _build_meilisearch_backend,
    }


def _build_local_backend(config: AppConfig) -> SearchBackend:
    from ConceptSearch.backends.local import LocalIndexBackend

    return LocalIndexBackend(config.local)


def _build_typesense_backend(config: AppConfig) -> SearchBackend:
    import typesense

    from ConceptSearch.backends.typesense import TypesenseBackend

    ts = config.typesense
    client = typesense.Client(
        {
            "nodes": [{"host": ts.host, "port": str(ts.port), "protocol": ts.protocol}],
            "api_key": ts.api_key,
            "connection_timeout_seconds": ts.connection_timeout,
        }
    )
    return TypesenseBackend(client=client, config=ts)


def _build_meilisearch_backend(config: AppConfig) -> SearchBackend:
    import meilisearch

    from ConceptSearch.backends.meilisearch import MeilisearchBackend

    ms = config.meilisearch
    client = meilisearch.Client(ms.url, ms.api_key or None)
    return MeilisearchBackend(client=client, config=ms)
