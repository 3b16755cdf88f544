"""Output renderers for ConceptSearch."""

from __future__ import annotations

from ConceptSearch.renderers.console import render_report, render_stats

__all__ = ["render_report", "render_stats"]
