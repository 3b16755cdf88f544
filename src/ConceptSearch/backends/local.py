"""File-backed full-text index built with lunr.

The whole index is built in memory during ``create`` and written as one
JSON snapshot. ``search`` loads that snapshot back wholesale; it cannot be
updated incrementally.

Snapshot layout::

    {
        "version": 1,
        "fields": [...],
        "index": <lunr serialized index or null when nothing was imported>,
        "store": {uri: {stored field: value}},
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from lunr.builder import Builder
from lunr.index import Index
from lunr.pipeline import Pipeline
from lunr.query import Query, QueryPresence
from lunr.tokenizer import Tokenizer
from lunr.trimmer import trimmer

from ConceptSearch.backends.base import BackendError
from ConceptSearch.config.local import MAX_EDIT_DISTANCE, LocalIndexConfig
from ConceptSearch.core.mapper import map_concept_summary
from ConceptSearch.core.models import Document, Record, SearchHit, SearchResult
from ConceptSearch.utils.log import log

SNAPSHOT_VERSION = 1
REF_FIELD = "uri"


class LocalIndexBackend:
    """Search backend storing a lunr index in a single JSON file."""

    name = "local"

    def __init__(self, config: LocalIndexConfig) -> None:
        self.config = config
        self.batch_size = config.batch_size
        self.index_path = Path(config.index_path)
        self._builder: Builder | None = None
        self._store: dict[str, dict[str, Any]] = {}
        self._index: Index | None = None
        self._loaded = False
        self._query_pipeline = Pipeline()
        self._query_pipeline.add(trimmer)

    def map_document(self, record: Record) -> Document | None:
        return map_concept_summary(
            record,
            language=self.config.language,
            with_search_keys="searchKeys" in self.config.fields,
        )

    def recreate(self) -> None:
        """Start a fresh in-memory index and drop the previous snapshot."""
        if self.index_path.exists():
            self.index_path.unlink()
            log.info("- Index file %s deleted.", self.index_path)
        self._builder = self._new_builder()
        self._store = {}
        self._index = None
        self._loaded = False

    def submit(self, documents: Sequence[Document]) -> int:
        """Add a batch to the in-memory index.

        Documents that lunr rejects, or whose URI was already added, are
        logged and left out.
        """
        if not documents:
            return 0
        if self._builder is None:
            raise BackendError("recreate() must be called before submit()")
        accepted = 0
        for document in documents:
            ref = document[REF_FIELD]
            if ref in self._store:
                log.warning("Error adding document: duplicate uri=%s", ref)
                continue
            try:
                self._builder.add(document)
            except Exception as error:  # noqa: BLE001 - one bad document must not stop the batch
                log.warning("Error adding document: uri=%s error=%s", ref, error)
                continue
            self._store[ref] = {name: document.get(name) for name in self.config.store_fields}
            accepted += 1
        return accepted

    def finalize(self) -> None:
        """Build the index and write the snapshot file."""
        if self._builder is None:
            raise BackendError("recreate() must be called before finalize()")
        self._index = self._builder.build() if self._store else None
        payload = {
            "version": SNAPSHOT_VERSION,
            "fields": list(self.config.fields),
            "index": self._index.serialize() if self._index is not None else None,
            "store": self._store,
        }
        self.index_path.parent.mkdir(parents=True, exist_ok=True)
        self.index_path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        self._loaded = True
        log.info("- Index with %d documents written to %s.", len(self._store), self.index_path)

    def search(self, query: str, *, limit: int) -> SearchResult:
        """Query every token on its own and combine the matches.

        With ``combine_with: AND`` only refs matched by every token are
        kept, with ``OR`` any match counts. Scores are summed over tokens.
        """
        self._load()
        if self._index is None:
            return SearchResult(hits=(), total=0)

        scores: dict[str, float] | None = None
        for term in self._query_terms(query):
            matches = {result["ref"]: result["score"] for result in self._index.query(self._term_query(term))}
            if scores is None:
                scores = matches
            elif self.config.combine_with == "AND":
                scores = {ref: score + matches[ref] for ref, score in scores.items() if ref in matches}
            else:
                for ref, score in matches.items():
                    scores[ref] = scores.get(ref, 0.0) + score
        ranked = sorted((scores or {}).items(), key=lambda item: item[1], reverse=True)

        hits = []
        for ref, score in ranked[:limit]:
            stored = self._store.get(ref, {})
            hits.append(
                SearchHit(
                    id=ref,
                    label=stored.get("prefLabel") or "",
                    notation=stored.get("notation") or "",
                    score=score,
                )
            )
        return SearchResult(hits=tuple(hits), total=len(ranked))

    def close(self) -> None:
        self._builder = None

    def edit_distance(self, term: str) -> int:
        """Return the fuzzy edit distance allowed for ``term``.

        A ``fuzzy`` value below 1 is a fraction of the term length, anything
        else is an absolute distance; both are capped at ``max_fuzzy`` and
        never exceed ``MAX_EDIT_DISTANCE``.
        """
        fuzzy = self.config.fuzzy
        distance = int(len(term) * fuzzy + 0.5) if fuzzy < 1 else int(fuzzy)
        return min(distance, self.config.max_fuzzy, MAX_EDIT_DISTANCE)

    def _new_builder(self) -> Builder:
        builder = Builder()
        builder.pipeline.add(trimmer)
        builder.ref(REF_FIELD)
        for field_name in self.config.fields:
            builder.field(field_name, boost=self.config.boost.get(field_name, 1))
        return builder

    def _load(self) -> None:
        if self._loaded:
            return
        try:
            payload = json.loads(self.index_path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise BackendError(f"Index file {self.index_path} not found, run create first") from e
        if payload.get("version") != SNAPSHOT_VERSION:
            raise BackendError(f"Unsupported index file version: {payload.get('version')}")
        serialized = payload.get("index")
        self._index = Index.load(serialized) if serialized else None
        self._store = payload.get("store") or {}
        self._loaded = True
        log.debug("Loaded index file %s with %d documents", self.index_path, len(self._store))

    def _query_terms(self, query: str) -> list[str]:
        tokens = self._query_pipeline.run(Tokenizer(query))
        return [str(token) for token in tokens if str(token)]

    def _term_query(self, term: str) -> Query:
        # Exact, prefix and fuzzy clauses are alternatives for one token.
        lunr_query = self._index.create_query()
        lunr_query.term(term, use_pipeline=False, presence=QueryPresence.OPTIONAL)
        if self.config.prefix:
            lunr_query.term(
                term,
                use_pipeline=False,
                wildcard=Query.WILDCARD_TRAILING,
                boost=self.config.prefix_weight,
                presence=QueryPresence.OPTIONAL,
            )
        distance = self.edit_distance(term)
        if distance:
            lunr_query.term(
                term,
                use_pipeline=False,
                edit_distance=distance,
                boost=self.config.fuzzy_weight,
                presence=QueryPresence.OPTIONAL,
            )
        return lunr_query
