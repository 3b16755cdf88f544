"""Run a single query against a search backend."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ConceptSearch.backends.base import SearchBackend
from ConceptSearch.core.models import SearchHit, SearchResult

DEFAULT_FETCH_LIMIT = 250


@dataclass(frozen=True, slots=True)
class QueryReport:
    """Outcome of one query.

    Attributes:
        query: The query string as given.
        result: Hits as returned by the backend plus the total count.
        shown: The first ``display_limit`` hits.
        notation_rank: 0-based rank of the first hit whose notation equals
            the query, or -1.
    """

    query: str
    result: SearchResult
    shown: Sequence[SearchHit]
    notation_rank: int


@dataclass(frozen=True, slots=True)
class QueryRunner:
    """Send one query to a backend and cut the hits to a display window.

    Ranking and matching are left entirely to the backend.
    """

    backend: SearchBackend
    display_limit: int = 10
    fetch_limit: int = DEFAULT_FETCH_LIMIT

    def run(self, query: str) -> QueryReport:
        """Run ``query``; backend errors propagate to the caller."""
        result = self.backend.search(query, limit=max(self.display_limit, self.fetch_limit))
        return QueryReport(
            query=query,
            result=result,
            shown=tuple(result.hits[: self.display_limit]),
            notation_rank=_notation_rank(result.hits, query),
        )


def _notation_rank(hits: Sequence[SearchHit], query: str) -> int:
    for rank, hit in enumerate(hits):
        if hit.notation and hit.notation == query:
            return rank
    return -1
