"""Command implementations for StudyFinder CLI.

Encapsulates business logic for commands like search, separated from
CLI parameter handling and output formatting.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass

import click

from StudyFinder.core.errors import StudySearchError
from StudyFinder.core.query import DensityMode
from StudyFinder.core.state import StudyListState
from StudyFinder.renderers import render_outcome, render_text
from StudyFinder.services.search import StudySearchService
from StudyFinder.utils.log import log


@dataclass(slots=True)
class SearchCommand:
    """Run one study search and print the resulting page."""

    search_service: StudySearchService
    state: StudyListState
    density: DensityMode
    output_format: str = "console"

    def execute(self) -> None:
        """Execute the search and write the page to stdout.

        Raises:
            StudySearchError: When the search failed.
        """
        criteria = {k: v for k, v in asdict(self.state.criteria).items() if v}
        log.info("density=%s criteria=%s", self.density.value, criteria)
        log.info(
            "sort=%s/%s page=%d rows=%d",
            self.state.sort.field,
            getattr(self.state.sort.direction, "value", None),
            self.state.page.page_number,
            self.state.page.rows_per_page,
        )

        outcome = self.search_service.search(self.state, self.density)

        if self.output_format == "json":
            click.echo(json.dumps(render_outcome(outcome), ensure_ascii=False, indent=2))
        if outcome.failed:
            raise StudySearchError(f"Search failed: {outcome.error}") from outcome.error

        log.info("Fetched %d studies", len(outcome.studies))
        if self.output_format != "json":
            text = render_text(outcome.studies)
            click.echo(text if text else "No studies found.")
