"""Meilisearch server configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ConceptSearch.config.common import (
    check_non_empty,
    expect_int,
    expect_str,
    get_optional_value,
    get_section,
    load_api_key_from_env,
)


@dataclass(frozen=True, slots=True)
class MeilisearchConfig:
    """Store validated Meilisearch connection and import settings."""

    url: str
    api_key_env: str
    api_key: str
    index: str
    batch_size: int
    language: str
    task_timeout_ms: int


def load_meilisearch(raw: Mapping[str, Any]) -> MeilisearchConfig:
    """Load Meilisearch config from raw mapping.

    A missing API key is allowed: a development instance started without a
    master key accepts unauthenticated requests.
    """
    section = get_section(raw, "meilisearch", required=False)
    api_key_env = expect_str(
        get_optional_value(section, "api_key_env", "MEILI_MASTER_KEY"), "meilisearch.api_key_env"
    )
    return MeilisearchConfig(
        url=expect_str(get_optional_value(section, "url", "http://localhost:7700"), "meilisearch.url"),
        api_key_env=api_key_env,
        api_key=load_api_key_from_env(api_key_env),
        index=expect_str(get_optional_value(section, "index", "concepts"), "meilisearch.index"),
        batch_size=expect_int(get_optional_value(section, "batch_size", 1000), "meilisearch.batch_size"),
        language=expect_str(get_optional_value(section, "language", "de"), "meilisearch.language"),
        task_timeout_ms=expect_int(
            get_optional_value(section, "task_timeout_ms", 60000), "meilisearch.task_timeout_ms"
        ),
    )


def check_meilisearch(config: MeilisearchConfig) -> None:
    """Validate Meilisearch constraints."""
    check_non_empty(config.url, "meilisearch.url")
    check_non_empty(config.index, "meilisearch.index")
    check_non_empty(config.language, "meilisearch.language")
    if config.batch_size <= 0:
        raise ValueError("meilisearch.batch_size must be positive")
    if config.task_timeout_ms <= 0:
        raise ValueError("meilisearch.task_timeout_ms must be positive")
