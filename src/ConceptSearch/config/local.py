"""Local index configuration.

The options record for the file-backed lunr index: which summary fields are
indexed, the language used to pick labels, per-field boosts, and the
prefix/fuzzy matching behavior applied to each query token.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ConceptSearch.config.common import (
    check_non_empty,
    expect_bool,
    expect_float,
    expect_float_map,
    expect_int,
    expect_str,
    expect_str_list,
    get_optional_value,
    get_section,
)

LOCAL_INDEX_FIELDS = ("notation", "prefLabel", "altLabel", "searchKeys")
_ALLOWED_COMBINE = {"AND", "OR"}
# lunr expands fuzzy terms with an automaton exponential in the edit distance.
MAX_EDIT_DISTANCE = 2


@dataclass(frozen=True, slots=True)
class LocalIndexConfig:
    """Store validated settings of the local index backend."""

    index_path: str
    batch_size: int
    language: str
    fields: tuple[str, ...]
    store_fields: tuple[str, ...]
    boost: Mapping[str, float] = field(default_factory=dict)
    combine_with: str = "AND"
    prefix: bool = True
    fuzzy: float = 0.2
    max_fuzzy: int = MAX_EDIT_DISTANCE
    prefix_weight: float = 0.5
    fuzzy_weight: float = 0.2


def load_local(raw: Mapping[str, Any]) -> LocalIndexConfig:
    """Load local index config; every key has a default.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "local", required=False)
    return LocalIndexConfig(
        index_path=expect_str(get_optional_value(section, "index_path", "index/concepts.json"), "local.index_path"),
        batch_size=expect_int(get_optional_value(section, "batch_size", 1000), "local.batch_size"),
        language=expect_str(get_optional_value(section, "language", "de"), "local.language"),
        fields=tuple(
            expect_str_list(get_optional_value(section, "fields", ["notation", "prefLabel", "searchKeys"]), "local.fields")
        ),
        store_fields=tuple(
            expect_str_list(get_optional_value(section, "store_fields", ["notation", "prefLabel"]), "local.store_fields")
        ),
        boost=expect_float_map(get_optional_value(section, "boost", {"notation": 5}), "local.boost"),
        combine_with=expect_str(get_optional_value(section, "combine_with", "AND"), "local.combine_with").upper(),
        prefix=expect_bool(get_optional_value(section, "prefix", True), "local.prefix"),
        fuzzy=expect_float(get_optional_value(section, "fuzzy", 0.2), "local.fuzzy"),
        max_fuzzy=expect_int(get_optional_value(section, "max_fuzzy", MAX_EDIT_DISTANCE), "local.max_fuzzy"),
        prefix_weight=expect_float(get_optional_value(section, "prefix_weight", 0.5), "local.prefix_weight"),
        fuzzy_weight=expect_float(get_optional_value(section, "fuzzy_weight", 0.2), "local.fuzzy_weight"),
    )


def check_local(config: LocalIndexConfig) -> None:
    """Validate local index constraints.

    Raises:
        ValueError: If values violate local index constraints.
    """
    check_non_empty(config.index_path, "local.index_path")
    check_non_empty(config.language, "local.language")
    if config.batch_size <= 0:
        raise ValueError("local.batch_size must be positive")
    if not config.fields:
        raise ValueError("local.fields must include at least one field")
    for name in config.fields:
        if name not in LOCAL_INDEX_FIELDS:
            raise ValueError(f"local.fields has unsupported value '{name}', expected one of {list(LOCAL_INDEX_FIELDS)}")
    for name in config.store_fields:
        if name not in LOCAL_INDEX_FIELDS:
            raise ValueError(
                f"local.store_fields has unsupported value '{name}', expected one of {list(LOCAL_INDEX_FIELDS)}"
            )
    for name in config.boost:
        if name not in config.fields:
            raise ValueError(f"local.boost.{name} refers to a field missing from local.fields")
    if config.combine_with not in _ALLOWED_COMBINE:
        raise ValueError(f"local.combine_with must be one of {sorted(_ALLOWED_COMBINE)}")
    if config.fuzzy < 0:
        raise ValueError("local.fuzzy must be >= 0")
    if not 0 <= config.max_fuzzy <= MAX_EDIT_DISTANCE:
        raise ValueError(f"local.max_fuzzy must be between 0 and {MAX_EDIT_DISTANCE}")
    if config.prefix_weight <= 0 or config.fuzzy_weight <= 0:
        raise ValueError("local.prefix_weight and local.fuzzy_weight must be positive")
