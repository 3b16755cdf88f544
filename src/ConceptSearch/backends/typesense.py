"""Typesense backend.

Documents are fully flattened concepts (see ``map_concept``); every field is
indexed with infix search enabled so that queries match inside words.
"""

from __future__ import annotations

from typing import Any, Sequence

from typesense.exceptions import ObjectNotFound

from ConceptSearch.config.typesense import TypesenseConfig
from ConceptSearch.core.mapper import map_concept
from ConceptSearch.core.models import Document, Record, SearchHit, SearchResult
from ConceptSearch.utils.log import log

SEARCH_FIELDS = ("identifier", "prefLabel", "altLabel", "notes")


def collection_schema(name: str) -> dict[str, Any]:
    """Return the collection schema for concept documents."""
    return {
        "name": name,
        "fields": [{"name": field, "type": "string[]", "infix": True} for field in SEARCH_FIELDS],
    }


class TypesenseBackend:
    """Search backend talking to a Typesense server."""

    name = "typesense"

    def __init__(self, *, client: Any, config: TypesenseConfig) -> None:
        self._client = client
        self.config = config
        self.collection = config.collection
        self.batch_size = config.batch_size

    def map_document(self, record: Record) -> Document | None:
        return map_concept(record)

    def recreate(self) -> None:
        """Delete the collection if it exists, then create it."""
        try:
            self._client.collections[self.collection].delete()
            log.info("- Collection %s deleted.", self.collection)
        except ObjectNotFound:
            log.debug("Collection %s did not exist", self.collection)
        self._client.collections.create(collection_schema(self.collection))
        log.info("- Collection %s created.", self.collection)

    def submit(self, documents: Sequence[Document]) -> int:
        """Import one batch; documents rejected by Typesense are logged.

        Returns:
            Number of documents Typesense reported as imported.
        """
        if not documents:
            return 0
        results = self._client.collections[self.collection].documents.import_(
            list(documents), {"action": "create"}
        )
        accepted = 0
        for document, result in zip(documents, results):
            if result.get("success"):
                accepted += 1
            else:
                log.warning("Error importing document: id=%s error=%s", document.get("id"), result.get("error"))
        return accepted

    def finalize(self) -> None:
        """Nothing to flush; Typesense persists on import."""

    def search(self, query: str, *, limit: int) -> SearchResult:
        params = {
            "q": query,
            "query_by": ",".join(SEARCH_FIELDS),
            "infix": ",".join("always" for _ in SEARCH_FIELDS),
            "per_page": min(limit, self.config.per_page),
        }
        response = self._client.collections[self.collection].documents.search(params)
        hits = tuple(_to_hit(hit) for hit in response.get("hits", []))
        return SearchResult(hits=hits, total=int(response.get("found", len(hits))))

    def close(self) -> None:
        return


def _to_hit(hit: dict[str, Any]) -> SearchHit:
    document = hit.get("document", {})
    concept = document.get("concept") or {}
    labels = document.get("prefLabel") or []
    label = labels[0] if labels else _first_concept_label(concept)
    notations = concept.get("notation") or []
    return SearchHit(
        id=document.get("id", ""),
        label=label,
        notation=str(notations[0]) if notations else "",
        score=hit.get("text_match"),
    )


def _first_concept_label(concept: dict[str, Any]) -> str:
    for value in (concept.get("prefLabel") or {}).values():
        return value if isinstance(value, str) else (value[0] if value else "")
    return ""
