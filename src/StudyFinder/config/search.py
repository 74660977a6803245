"""Search domain configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from StudyFinder.config.common import (
    check_choice,
    check_positive,
    expect_int,
    expect_optional_str,
    expect_str,
    get_section,
)
from StudyFinder.core.query import DEFAULT_ROWS_PER_PAGE, DensityMode, SortDirection, SortSpec
from StudyFinder.services.sort import resolve_sort_field

_ALLOWED_DENSITIES = {mode.value for mode in DensityMode}
_ALLOWED_DIRECTIONS = {direction.value for direction in SortDirection}


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Store validated search behavior and defaults."""

    density: str
    rows_per_page: int
    lookback_days: int
    debounce_ms: int
    max_workers: int
    sort_field: str | None
    sort_direction: str | None

    @property
    def default_sort(self) -> SortSpec:
        if self.sort_field is None or self.sort_direction is None:
            return SortSpec(field=None, direction=None)
        return SortSpec(field=self.sort_field, direction=SortDirection(self.sort_direction))

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0


def load_search(raw: Mapping[str, Any]) -> SearchConfig:
    """Load search domain config from raw mapping.

    Every key is optional and falls back to the study list defaults.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "search", required=False)
    sort = section.get("sort", {"field": "patient_name", "direction": "desc"})
    if not isinstance(sort, Mapping):
        raise TypeError("search.sort must be an object")
    direction = expect_optional_str(sort.get("direction"), "search.sort.direction")
    return SearchConfig(
        density=expect_str(section.get("density", DensityMode.FULL.value), "search.density").strip().lower(),
        rows_per_page=expect_int(section.get("rows_per_page", DEFAULT_ROWS_PER_PAGE), "search.rows_per_page"),
        lookback_days=expect_int(section.get("lookback_days", 25000), "search.lookback_days"),
        debounce_ms=expect_int(section.get("debounce_ms", 225), "search.debounce_ms"),
        max_workers=expect_int(section.get("max_workers", 5), "search.max_workers"),
        sort_field=expect_optional_str(sort.get("field"), "search.sort.field"),
        sort_direction=direction.strip().lower() if direction is not None else None,
    )


def check_search(config: SearchConfig) -> None:
    """Validate search domain constraints.

    Raises:
        ValueError: If values violate search constraints.
    """
    check_choice(config.density, _ALLOWED_DENSITIES, "search.density")
    check_positive(config.rows_per_page, "search.rows_per_page")
    check_positive(config.lookback_days, "search.lookback_days")
    if config.debounce_ms < 0:
        raise ValueError("search.debounce_ms must be >= 0")
    check_positive(config.max_workers, "search.max_workers")
    if config.sort_direction is not None:
        check_choice(config.sort_direction, _ALLOWED_DIRECTIONS, "search.sort.direction")
    if config.sort_field is not None:
        try:
            resolve_sort_field(config.sort_field)
        except ValueError as e:
            raise ValueError(f"search.sort.field is not sortable: {config.sort_field}") from e
