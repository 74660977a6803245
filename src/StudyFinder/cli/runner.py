"""Command runner for coordinating CLI execution.

Manages component lifecycle, resource cleanup, logging configuration,
and error handling for command execution.
"""

from __future__ import annotations

import click

from StudyFinder.cli.commands import SearchCommand
from StudyFinder.config import AppConfig
from StudyFinder.core.query import DensityMode
from StudyFinder.core.state import StudyListState
from StudyFinder.services import create_search_service
from StudyFinder.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run_search(
        self,
        action: str,
        *,
        state: StudyListState,
        density: DensityMode,
        output_format: str,
    ) -> None:
        """Execute search command with full resource management.

        Args:
            action: The CLI command name (e.g., 'search').
            state: Filters, sort and paging for this search.
            density: Presentation density used for filter expansion.
            output_format: `console` or `json`.

        Raises:
            click.Abort: When the search fails.
        """
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        service = None
        try:
            service = create_search_service(self.config)
            command = SearchCommand(
                search_service=service,
                state=state,
                density=density,
                output_format=output_format,
            )
            command.execute()
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Search failed: %s", e)
            raise click.Abort from e
        finally:
            if service is not None:
                service.close()
