"""Command implementations for ConceptSearch CLI.

Encapsulates the create and search workflows, separated from CLI
parameter handling and resource management.
"""

from __future__ import annotations

from dataclasses import dataclass

from ConceptSearch.backends.base import SearchBackend
from ConceptSearch.config import AppConfig
from ConceptSearch.core.models import ImportStats
from ConceptSearch.renderers.console import render_report, render_stats
from ConceptSearch.services.importer import BatchImporter
from ConceptSearch.services.query import QueryReport, QueryRunner
from ConceptSearch.sources.reader import read_records
from ConceptSearch.utils.log import log, log_timing


@dataclass(slots=True)
class SearchCommand:
    """Run one query and print the displayed hits and the total."""

    query_runner: QueryRunner

    def execute(self, query: str) -> QueryReport:
        with log_timing("Search"):
            report = self.query_runner.run(query)
        for line in render_report(report).splitlines():
            log.info(line)
        return report


@dataclass(slots=True)
class CreateCommand:
    """Import a file or URL into the configured backend.

    Optionally runs a probe query once the import has finished.
    """

    config: AppConfig
    backend: SearchBackend
    importer: BatchImporter
    query_runner: QueryRunner | None = None

    def execute(self, source: str, *, probe: str | None = None) -> ImportStats:
        log.info("backend=%s source=%s", self.backend.name, source)
        records = read_records(
            source,
            fmt=self.config.source.format,
            timeout=self.config.source.timeout,
        )
        with log_timing("Read and create index"):
            stats = self.importer.run(records)
        log.info(render_stats(stats))

        if probe and self.query_runner:
            log.info("Probe query: %s", probe)
            SearchCommand(query_runner=self.query_runner).execute(probe)
        return stats
