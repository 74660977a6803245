"""Search service layer for StudyFinder.

Provides the study search pipeline and a factory wiring it to the configured
remote catalog.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from StudyFinder.core.query import DensityMode
from StudyFinder.services.debounce import DebouncedSearch, ResultCallback
from StudyFinder.services.execute import StudySource
from StudyFinder.services.search import SearchOutcome, StudySearchService

if TYPE_CHECKING:
    from StudyFinder.config import AppConfig


def create_search_service(config: AppConfig, source: StudySource | None = None) -> StudySearchService:
    """Create a search service for the configured server.

    Args:
        config: Application configuration.
        source: Optional source overriding the registry-built one.

    Returns:
        Configured StudySearchService instance.
    """
    if source is None:
        from StudyFinder.sources.registry import build_source

        source = build_source(config.server)

    return StudySearchService(
        source=source,
        supports_fuzzy_matching=config.server.supports_fuzzy_matching,
        max_workers=config.search.max_workers,
        lookback_days=config.search.lookback_days,
    )


def create_debounced_search(
    config: AppConfig,
    service: StudySearchService,
    *,
    density: DensityMode | str | None = None,
    on_result: ResultCallback | None = None,
) -> DebouncedSearch:
    """Wrap a search service in a debouncer using the configured delay.

    Args:
        config: Application configuration.
        service: Search service to run submissions with.
        density: Presentation density; defaults to `search.density`.
        on_result: Callback receiving `(token, outcome)` for current results.

    Returns:
        DebouncedSearch delaying by `search.debounce_ms`.
    """
    return DebouncedSearch(
        service,
        density=density if density is not None else config.search.density,
        on_result=on_result,
        delay=config.search.debounce_seconds,
    )


__all__ = [
    "DebouncedSearch",
    "SearchOutcome",
    "StudySearchService",
    "StudySource",
    "create_debounced_search",
    "create_search_service",
]
