"""Command runner for coordinating CLI execution.

Manages component lifecycle, resource cleanup, logging configuration,
and error handling for command execution.
"""

from __future__ import annotations

import click

from ConceptSearch.backends import create_backend
from ConceptSearch.cli.commands import CreateCommand, SearchCommand
from ConceptSearch.config import AppConfig
from ConceptSearch.services import create_importer, create_query_runner
from ConceptSearch.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management.

    Every error raised inside a command is logged once here and turned into
    ``click.Abort`` so the process exits with a non-zero status.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run_create(self, action: str, source: str, *, probe: str | None = None) -> None:
        """Execute the create command.

        Args:
            action: The CLI command name (e.g., 'create').
            source: File path or URL to import.
            probe: Optional query to run after the import.

        Raises:
            click.Abort: When the import fails.
        """
        self._configure_logging(action)
        backend = None
        try:
            backend = create_backend(self.config)
            command = CreateCommand(
                config=self.config,
                backend=backend,
                importer=create_importer(backend),
                query_runner=create_query_runner(self.config, backend) if probe else None,
            )
            command.execute(source, probe=probe)
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Create failed: %s", e)
            raise click.Abort from e
        finally:
            if backend is not None:
                backend.close()

    def run_search(self, action: str, query: str) -> None:
        """Execute the search command.

        Raises:
            click.Abort: When the search fails.
        """
        self._configure_logging(action)
        backend = None
        try:
            backend = create_backend(self.config)
            SearchCommand(query_runner=create_query_runner(self.config, backend)).execute(query)
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Search failed: %s", e)
            raise click.Abort from e
        finally:
            if backend is not None:
                backend.close()

    def _configure_logging(self, action: str) -> None:
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
