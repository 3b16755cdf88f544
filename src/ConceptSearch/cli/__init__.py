"""CLI package for ConceptSearch command orchestration."""

from __future__ import annotations

__all__ = ["CommandRunner", "cli", "main"]

from ConceptSearch.cli.runner import CommandRunner
from ConceptSearch.cli.ui import cli


def main() -> None:
    """Run ConceptSearch CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
