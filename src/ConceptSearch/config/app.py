from __future__ import annotations

"""Application config orchestration and YAML loading entrypoints."""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from ConceptSearch.config.backend import BackendConfig, check_backend, load_backend
from ConceptSearch.config.local import LocalIndexConfig, check_local, load_local
from ConceptSearch.config.meilisearch import MeilisearchConfig, check_meilisearch, load_meilisearch
from ConceptSearch.config.runtime import RuntimeConfig, check_runtime, load_runtime
from ConceptSearch.config.source import SourceConfig, check_source, load_source
from ConceptSearch.config.typesense import TypesenseConfig, check_typesense, load_typesense


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig
    source: SourceConfig
    backend: BackendConfig
    local: LocalIndexConfig
    typesense: TypesenseConfig
    meilisearch: MeilisearchConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse normalized mapping into AppConfig."""
    runtime = load_runtime(raw)
    source = load_source(raw)
    backend = load_backend(raw)
    local = load_local(raw)
    typesense = load_typesense(raw)
    meilisearch = load_meilisearch(raw)

    check_runtime(runtime)
    check_source(source)
    check_backend(backend)
    check_local(local)
    check_typesense(typesense, selected=backend.name == "typesense")
    check_meilisearch(meilisearch)

    return AppConfig(
        runtime=runtime,
        source=source,
        backend=backend,
        local=local,
        typesense=typesense,
        meilisearch=meilisearch,
    )


def load_config(path: Path) -> AppConfig:
    """Load YAML config file without default merge."""
    return load_config_with_defaults(path, default_path=path)


def load_config_with_defaults(
    config_path: Path, default_path: Path = Path("config/default.yml")
) -> AppConfig:
    """Load config by merging defaults and optional override."""
    return parse_config_dict(load_raw_config(config_path, default_path=default_path))


def load_raw_config(config_path: Path, default_path: Path = Path("config/default.yml")) -> dict[str, Any]:
    """Read defaults and optional override into one merged mapping."""
    base = parse_yaml(default_path.read_text(encoding="utf-8"))
    if config_path == default_path:
        return base
    override = parse_yaml(config_path.read_text(encoding="utf-8"))
    return merge_config_dicts(base, override)


def with_backend(raw: Mapping[str, Any], backend_name: str) -> dict[str, Any]:
    """Return a copy of ``raw`` with ``backend.name`` replaced."""
    return merge_config_dicts(raw, {"backend": {"name": backend_name}})


def with_display_limit(config: AppConfig, display_limit: int) -> AppConfig:
    """Return a copy of ``config`` printing ``display_limit`` hits."""
    backend = replace(config.backend, display_limit=display_limit)
    check_backend(backend)
    return replace(config, backend=backend)


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse raw YAML text into a mapping."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
