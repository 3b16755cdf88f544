"""Capability interface shared by all search backends."""

from __future__ import annotations

from typing import Protocol, Sequence

from ConceptSearch.core.models import Document, Record, SearchResult


class BackendError(RuntimeError):
    """Raised when a backend rejects a bulk submission or a lifecycle call."""


class SearchBackend(Protocol):
    """Protocol for a full-text search backend.

    A create run calls ``recreate`` once, ``submit`` once per batch
    (including a possibly empty trailing batch) and ``finalize`` at the end.
    """

    name: str
    batch_size: int

    def map_document(self, record: Record) -> Document | None:
        """Map a raw record to this backend's document shape, or None to skip."""
        raise NotImplementedError

    def recreate(self) -> None:
        """Drop any existing collection and create it with the declared schema."""
        raise NotImplementedError

    def submit(self, documents: Sequence[Document]) -> int:
        """Submit one batch and return how many documents were accepted."""
        raise NotImplementedError

    def finalize(self) -> None:
        """Persist or flush whatever the backend needs after the last batch."""
        raise NotImplementedError

    def search(self, query: str, *, limit: int) -> SearchResult:
        """Run one query and return at most ``limit`` hits plus the total count."""
        raise NotImplementedError

    def close(self) -> None:
        """Close resources held by the backend."""
        raise NotImplementedError
