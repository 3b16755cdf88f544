"""Batch import of concept records into a search backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ConceptSearch.backends.base import SearchBackend
from ConceptSearch.core.models import Document, ImportStats, Record
from ConceptSearch.utils.log import log


@dataclass(slots=True)
class BatchImporter:
    """Feed mapped documents to a backend in fixed-size batches.

    Only one batch is held in memory: the next one is not accumulated
    before the previous submission has returned. Submission errors are not
    retried and abort the import.
    """

    backend: SearchBackend
    batch_size: int
    stats: ImportStats = field(default_factory=ImportStats)

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")

    def run(self, records: Iterable[Record]) -> ImportStats:
        """Recreate the collection and import every record.

        Args:
            records: Raw records, consumed lazily.

        Returns:
            Counters of the finished import.
        """
        self.stats = ImportStats()
        self.backend.recreate()

        batch: list[Document] = []
        for record in records:
            self.stats.read += 1
            document = self._map(record)
            if document is None:
                continue
            batch.append(document)
            if len(batch) >= self.batch_size:
                self._submit(batch)
                batch = []

        # Trailing flush; an empty batch is a no-op in every backend.
        self._submit(batch)
        self.backend.finalize()
        return self.stats

    def _map(self, record: Record) -> Document | None:
        try:
            document = self.backend.map_document(record)
        except Exception as error:  # noqa: BLE001 - a malformed record must not stop the stream
            self.stats.failed += 1
            log.warning("Error mapping record: uri=%s error=%s", _record_uri(record), error)
            return None
        if document is None:
            self.stats.skipped += 1
            log.debug("Skipped record without uri or prefLabel: uri=%s", _record_uri(record))
        return document

    def _submit(self, batch: list[Document]) -> None:
        accepted = self.backend.submit(batch)
        self.stats.batches += 1
        self.stats.submitted += accepted
        self.stats.failed += len(batch) - accepted
        if batch:
            log.info("- %d documents imported.", self.stats.submitted)


def _record_uri(record: Record) -> str:
    try:
        return str(record.get("uri"))
    except AttributeError:
        return "-"
