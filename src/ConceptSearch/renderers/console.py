"""Console text output renderers.

Renders query reports and import counters into human-friendly text; the
CLI prints the lines through the logger.
"""

from __future__ import annotations

from ConceptSearch.core.models import ImportStats
from ConceptSearch.services.query import QueryReport


def render_report(report: QueryReport) -> str:
    """Render the displayed hits of a query followed by the total count.

    Each hit is shown as its notation (or URI when it has none) with the
    preferred label indented below it.
    """
    lines: list[str] = []
    for hit in report.shown:
        lines.append(hit.notation or hit.id)
        lines.append(f"  {hit.label or '-'}")
    lines.append("")
    lines.append(f"{report.result.total} total results")
    if report.notation_rank >= 0:
        lines.append(f"Exact notation match at rank {report.notation_rank + 1}")
    return "\n".join(lines) + "\n"


def render_stats(stats: ImportStats) -> str:
    """Render import counters as a one-line summary."""
    return (
        f"Read {stats.read} records: {stats.submitted} imported, "
        f"{stats.skipped} skipped, {stats.failed} failed in {stats.batches} batches"
    )
