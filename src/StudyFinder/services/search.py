"""Search service layer for study list queries.

Fans one logical search out into single-field remote queries, then merges,
sorts and pages the results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional, Sequence

from StudyFinder.core.models import StudyRecord
from StudyFinder.core.query import DensityMode
from StudyFinder.core.state import StudyListState
from StudyFinder.services.execute import DEFAULT_MAX_WORKERS, StudySource, execute
from StudyFinder.services.expand import DEFAULT_LOOKBACK_DAYS, expand
from StudyFinder.services.paginate import paginate
from StudyFinder.services.reconcile import reconcile
from StudyFinder.services.sort import sort_records
from StudyFinder.utils.log import log


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    """Caller-visible result of one search.

    A failed search carries no studies and sets `error`. An empty `studies`
    with no error means the search succeeded and matched nothing.
    """

    studies: tuple[StudyRecord, ...] = ()
    is_searching: bool = False
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(slots=True)
class StudySearchService:
    """Application service that searches one remote study catalog."""

    source: StudySource
    supports_fuzzy_matching: bool = False
    max_workers: int = DEFAULT_MAX_WORKERS
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    today: Callable[[], date] = field(default=date.today)

    def search(self, state: StudyListState, density: DensityMode | str) -> SearchOutcome:
        """Run one search and return a bounded page.

        Never raises for search failures; they are reported on the outcome.

        Args:
            state: Filters, sort and paging snapshot.
            density: Presentation density deciding how composites expand.

        Returns:
            SearchOutcome with at most `state.page.rows_per_page` studies.
        """
        try:
            studies = self.search_studies(state, density)
        except Exception as error:  # noqa: BLE001 - search boundary
            log.error("Study search failed: %s", error)
            return SearchOutcome(error=error)
        return SearchOutcome(studies=tuple(studies))

    def search_studies(self, state: StudyListState, density: DensityMode | str) -> Sequence[StudyRecord]:
        """Run the search pipeline, propagating errors.

        Raises:
            RemoteSearchError: If a remote query failed.
            ValueError: If density or sort field is invalid.
        """
        specs = expand(
            state.criteria,
            density,
            page=state.page,
            fuzzy_matching=self.supports_fuzzy_matching,
            today=self.today(),
            lookback_days=self.lookback_days,
        )
        log.info(
            "Searching studies: density=%s queries=%d page=%d rows=%d",
            DensityMode(density).value,
            len(specs),
            state.page.page_number,
            state.page.rows_per_page,
        )

        batches = execute(specs, self.source, max_workers=self.max_workers)
        merged = reconcile(batches)
        ordered = sort_records(merged, state.sort.field, state.sort.direction)
        page = paginate(ordered, state.page.rows_per_page)
        log.info("Search completed: unique=%d returned=%d", len(merged), len(page))
        return page

    def close(self) -> None:
        """Close the source and release external resources."""
        close_func = getattr(self.source, "close", None)
        if not callable(close_func):
            return
        try:
            close_func()
        except Exception as error:  # noqa: BLE001 - close failure must be isolated
            log.warning("Study source close failed: source=%s error=%s", getattr(self.source, "name", "unknown"), error)
