from __future__ import annotations

"""Public configuration API for ConceptSearch."""

from ConceptSearch.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    load_raw_config,
    merge_config_dicts,
    parse_config_dict,
    with_backend,
    with_display_limit,
)
from ConceptSearch.config.backend import BackendConfig
from ConceptSearch.config.local import LocalIndexConfig
from ConceptSearch.config.meilisearch import MeilisearchConfig
from ConceptSearch.config.runtime import RuntimeConfig
from ConceptSearch.config.source import SourceConfig
from ConceptSearch.config.typesense import TypesenseConfig

__all__ = [
    "RuntimeConfig",
    "SourceConfig",
    "BackendConfig",
    "LocalIndexConfig",
    "TypesenseConfig",
    "MeilisearchConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "load_raw_config",
    "merge_config_dicts",
    "parse_config_dict",
    "with_backend",
    "with_display_limit",
]
