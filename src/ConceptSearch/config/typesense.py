"""Typesense server configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ConceptSearch.config.common import (
    check_non_empty,
    expect_float,
    expect_int,
    expect_str,
    get_optional_value,
    get_section,
    load_api_key_from_env,
)

_ALLOWED_PROTOCOLS = {"http", "https"}


@dataclass(frozen=True, slots=True)
class TypesenseConfig:
    """Store validated Typesense connection and import settings."""

    host: str
    port: int
    protocol: str
    api_key_env: str
    api_key: str
    collection: str
    batch_size: int
    connection_timeout: float
    per_page: int


def load_typesense(raw: Mapping[str, Any]) -> TypesenseConfig:
    """Load Typesense config from raw mapping.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed Typesense configuration. The API key is read from the
        environment variable named by ``typesense.api_key_env``.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "typesense", required=False)
    api_key_env = expect_str(
        get_optional_value(section, "api_key_env", "TYPESENSE_API_KEY"), "typesense.api_key_env"
    )
    return TypesenseConfig(
        host=expect_str(get_optional_value(section, "host", "localhost"), "typesense.host"),
        port=expect_int(get_optional_value(section, "port", 8108), "typesense.port"),
        protocol=expect_str(get_optional_value(section, "protocol", "http"), "typesense.protocol").lower(),
        api_key_env=api_key_env,
        api_key=load_api_key_from_env(api_key_env),
        collection=expect_str(get_optional_value(section, "collection", "test"), "typesense.collection"),
        batch_size=expect_int(get_optional_value(section, "batch_size", 10000), "typesense.batch_size"),
        connection_timeout=expect_float(
            get_optional_value(section, "connection_timeout", 15), "typesense.connection_timeout"
        ),
        per_page=expect_int(get_optional_value(section, "per_page", 250), "typesense.per_page"),
    )


def check_typesense(config: TypesenseConfig, *, selected: bool) -> None:
    """Validate Typesense constraints.

    Args:
        config: Parsed Typesense configuration.
        selected: Whether typesense is the configured backend; only then the
            API key must be present.

    Raises:
        ValueError: If values violate Typesense constraints.
    """
    check_non_empty(config.host, "typesense.host")
    check_non_empty(config.collection, "typesense.collection")
    check_non_empty(config.api_key_env, "typesense.api_key_env")
    if config.protocol not in _ALLOWED_PROTOCOLS:
        raise ValueError(f"typesense.protocol must be one of {sorted(_ALLOWED_PROTOCOLS)}")
    if not 0 < config.port < 65536:
        raise ValueError("typesense.port must be a valid TCP port")
    if config.batch_size <= 0:
        raise ValueError("typesense.batch_size must be positive")
    if config.connection_timeout <= 0:
        raise ValueError("typesense.connection_timeout must be positive")
    if not 0 < config.per_page <= 250:
        raise ValueError("typesense.per_page must be between 1 and 250")
    if selected and not config.api_key:
        raise ValueError(
            f"Typesense selected but {config.api_key_env} environment variable not set. "
            "Set it in your .env file or shell environment."
        )
