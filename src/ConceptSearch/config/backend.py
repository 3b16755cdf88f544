"""Backend selection configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ConceptSearch.backends.registry import supported_backend_names
from ConceptSearch.config.common import (
    expect_int,
    expect_str,
    get_optional_value,
    get_required_value,
    get_section,
)

_ALLOWED_BACKENDS = frozenset(supported_backend_names())


@dataclass(frozen=True, slots=True)
class BackendConfig:
    """Store which backend to use and how many hits to print."""

    name: str
    display_limit: int


def load_backend(raw: Mapping[str, Any]) -> BackendConfig:
    """Load backend selection from raw mapping.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "backend", required=True)
    name = expect_str(get_required_value(section, "name", "backend.name"), "backend.name")
    return BackendConfig(
        name=name.strip().lower(),
        display_limit=expect_int(
            get_optional_value(section, "display_limit", 10),
            "backend.display_limit",
        ),
    )


def check_backend(config: BackendConfig) -> None:
    """Validate backend selection constraints."""
    if config.name not in _ALLOWED_BACKENDS:
        raise ValueError(
            f"backend.name has unsupported value '{config.name}', "
            f"expected one of {sorted(_ALLOWED_BACKENDS)}"
        )
    if config.display_limit <= 0:
        raise ValueError("backend.display_limit must be positive")
