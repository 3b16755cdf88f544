"""Record source configuration (input format detection, HTTP timeout)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ConceptSearch.config.common import (
    expect_float,
    expect_str,
    get_optional_value,
    get_section,
)

_ALLOWED_FORMATS = {"auto", "ndjson", "json"}


@dataclass(frozen=True, slots=True)
class SourceConfig:
    """Store validated record source settings."""

    format: str
    timeout: float


def load_source(raw: Mapping[str, Any]) -> SourceConfig:
    """Load record source config; the whole section is optional."""
    section = get_section(raw, "source", required=False)
    return SourceConfig(
        format=expect_str(get_optional_value(section, "format", "auto"), "source.format").strip().lower(),
        timeout=expect_float(get_optional_value(section, "timeout", 60), "source.timeout"),
    )


def check_source(config: SourceConfig) -> None:
    """Validate record source constraints."""
    if config.format not in _ALLOWED_FORMATS:
        raise ValueError(f"source.format must be one of {sorted(_ALLOWED_FORMATS)}")
    if config.timeout <= 0:
        raise ValueError("source.timeout must be positive")
