"""Map raw concept records to backend documents.

All functions are pure: they never mutate the record they are given.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from ConceptSearch.core.models import Document, Record

COMBINED_CONCEPT = "http://rdf-vocabulary.ddialliance.org/xkos#CombinedConcept"


def is_combined_concept(record: Record) -> bool:
    """Return whether the record is typed as a combined concept."""
    return COMBINED_CONCEPT in (record.get("type") or [])


def map_concept(record: Record) -> Document | None:
    """Map a concept to a fully flattened document.

    The document has the following structure::

        {
            "id": URI,
            "concept": unmodified record,
            "identifier": [URI, *identifier, *notation],
            "prefLabel": all preferred labels (empty for combined concepts),
            "altLabel": all alternative labels (empty for combined concepts),
            "notes": scope and editorial notes (empty for combined concepts),
        }

    Returns:
        The document, or None if the record has no URI or no preferred label.

    Raises:
        TypeError: If a label field or the identifier list is malformed.
    """
    if not record or not record.get("uri") or not record.get("prefLabel"):
        return None
    uri = record["uri"]
    document: Document = {
        "id": uri,
        "concept": record,
        "identifier": [
            uri,
            *_as_list(record.get("identifier"), "identifier"),
            *_as_list(record.get("notation"), "notation"),
        ],
        "prefLabel": [],
        "altLabel": [],
        "notes": [],
    }
    if not is_combined_concept(record):
        document["prefLabel"] = flatten_language_map(record.get("prefLabel"), "prefLabel")
        document["altLabel"] = flatten_language_map(record.get("altLabel"), "altLabel")
        document["notes"] = [
            *flatten_language_map(record.get("scopeNote"), "scopeNote"),
            *flatten_language_map(record.get("editorialNote"), "editorialNote"),
        ]
    return document


def map_concept_summary(
    record: Record,
    *,
    language: str,
    with_search_keys: bool = False,
) -> Document | None:
    """Map a concept to a small document with one notation and one label.

    Labels are taken from ``language`` only. Search keys, when requested,
    are the suffixes of the preferred labels in every language.

    Returns:
        The document, or None if the record has no URI or no preferred label.

    Raises:
        TypeError: If a label field or the notation list is malformed.
    """
    if not record or not record.get("uri") or not record.get("prefLabel"):
        return None
    notations = _as_list(record.get("notation"), "notation")
    document: Document = {
        "uri": record["uri"],
        "notation": str(notations[0]) if notations else "",
        "prefLabel": "",
        "altLabel": "",
    }
    if with_search_keys:
        document["searchKeys"] = []
    if is_combined_concept(record):
        return document

    pref_labels = _expect_language_map(record.get("prefLabel"), "prefLabel")
    document["prefLabel"] = _first_text(pref_labels.get(language))
    alt_labels = _expect_language_map(record.get("altLabel") or {}, "altLabel")
    document["altLabel"] = " ".join(_flatten_value(alt_labels.get(language)))
    if with_search_keys:
        document["searchKeys"] = make_suffixes(flatten_language_map(pref_labels, "prefLabel"))
    return document


def make_suffixes(values: Iterable[str]) -> list[str]:
    """Return every suffix of every value, uppercased and trimmed.

    For each value, suffixes start at every index except the last one, so
    single-character suffixes are never produced. The result keeps
    first-seen order and has no duplicates.

    >>> make_suffixes(["abc"])
    ['ABC', 'BC']
    """
    results: list[str] = []
    seen: set[str] = set()
    for value in values:
        value = value.upper().strip()
        for start in range(len(value) - 1):
            suffix = value[start:]
            if suffix not in seen:
                seen.add(suffix)
                results.append(suffix)
    return results


def flatten_language_map(value: Any, field: str) -> list[str]:
    """Flatten a language map into a list in language iteration order.

    Each language may map to a single string or to a list of strings.
    A missing field flattens to an empty list.
    """
    if value is None:
        return []
    out: list[str] = []
    for item in _expect_language_map(value, field).values():
        out.extend(_flatten_value(item))
    return out


def _expect_language_map(value: Any, field: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"{field} must be a language map, got {type(value).__name__}")
    return value


def _flatten_value(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


def _first_text(value: Any) -> str:
    flat = _flatten_value(value)
    return flat[0] if flat else ""


def _as_list(value: Any, field: str) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (str, Mapping)) or not isinstance(value, (list, tuple)):
        raise TypeError(f"{field} must be a list, got {type(value).__name__}")
    return list(value)
