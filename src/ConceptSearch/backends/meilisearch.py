"""Meilisearch backend.

Meilisearch only accepts alphanumeric, ``-`` and ``_`` characters in
document ids, so the primary key is the SHA-1 of the concept URI and the
URI itself is kept in the ``uri`` field.
"""

from __future__ import annotations

import hashlib
from typing import Any, Sequence

from meilisearch.errors import MeilisearchApiError

from ConceptSearch.backends.base import BackendError
from ConceptSearch.config.meilisearch import MeilisearchConfig
from ConceptSearch.core.mapper import map_concept_summary
from ConceptSearch.core.models import Document, Record, SearchHit, SearchResult
from ConceptSearch.utils.log import log

PRIMARY_KEY = "id"
SEARCHABLE_ATTRIBUTES = ["notation", "prefLabel", "altLabel"]


def make_document_id(uri: str) -> str:
    """Return the Meilisearch-safe primary key for a concept URI."""
    return hashlib.sha1(uri.encode("utf-8")).hexdigest()


class MeilisearchBackend:
    """Search backend talking to a Meilisearch instance."""

    name = "meilisearch"

    def __init__(self, *, client: Any, config: MeilisearchConfig) -> None:
        self._client = client
        self.config = config
        self.index_uid = config.index
        self.batch_size = config.batch_size

    def map_document(self, record: Record) -> Document | None:
        document = map_concept_summary(record, language=self.config.language)
        if document is None:
            return None
        return {PRIMARY_KEY: make_document_id(document["uri"]), **document}

    def recreate(self) -> None:
        """Delete the index if it exists, create it and set searchable attributes."""
        task = self._wait(self._client.delete_index(self.index_uid), raise_on_failure=False)
        if _task_status(task) == "failed":
            if _task_error_code(task) != "index_not_found":
                raise BackendError(f"Deleting index {self.index_uid} failed: {_task_error(task)}")
            log.debug("Index %s did not exist", self.index_uid)
        else:
            log.info("- Index %s deleted.", self.index_uid)
        self._wait(self._client.create_index(self.index_uid, {"primaryKey": PRIMARY_KEY}))
        self._wait(self._client.index(self.index_uid).update_searchable_attributes(SEARCHABLE_ATTRIBUTES))
        log.info("- Index %s created.", self.index_uid)

    def submit(self, documents: Sequence[Document]) -> int:
        """Add one batch and wait until Meilisearch has processed it."""
        if not documents:
            return 0
        info = self._client.index(self.index_uid).add_documents(list(documents), primary_key=PRIMARY_KEY)
        self._wait(info)
        return len(documents)

    def finalize(self) -> None:
        """Nothing to flush; every batch was awaited in ``submit``."""

    def search(self, query: str, *, limit: int) -> SearchResult:
        try:
            response = self._client.index(self.index_uid).search(query, {"limit": limit})
        except MeilisearchApiError as e:
            raise BackendError(f"Search in index {self.index_uid} failed: {e}") from e
        hits = tuple(
            SearchHit(
                id=hit.get("uri", ""),
                label=hit.get("prefLabel") or "",
                notation=hit.get("notation") or "",
                score=hit.get("_rankingScore"),
            )
            for hit in response.get("hits", [])
        )
        total = response.get("estimatedTotalHits", response.get("totalHits", len(hits)))
        return SearchResult(hits=hits, total=int(total))

    def close(self) -> None:
        return

    def _wait(self, task_info: Any, *, raise_on_failure: bool = True) -> Any:
        task = self._client.wait_for_task(_task_uid(task_info), timeout_in_ms=self.config.task_timeout_ms)
        if raise_on_failure and _task_status(task) == "failed":
            raise BackendError(f"Meilisearch task {_task_uid(task_info)} failed: {_task_error(task)}")
        return task


# Depending on the client version, tasks come back as models or as dicts.
def _task_uid(task_info: Any) -> int:
    if isinstance(task_info, dict):
        return task_info.get("taskUid", task_info.get("uid"))
    uid = getattr(task_info, "task_uid", None)
    return uid if uid is not None else getattr(task_info, "uid")


def _task_status(task: Any) -> str | None:
    if isinstance(task, dict):
        return task.get("status")
    return getattr(task, "status", None)


def _task_error(task: Any) -> dict[str, Any]:
    error = task.get("error") if isinstance(task, dict) else getattr(task, "error", None)
    return error or {}


def _task_error_code(task: Any) -> str | None:
    return _task_error(task).get("code")
