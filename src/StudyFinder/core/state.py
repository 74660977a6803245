"""Immutable study list view state.

The caller owns the current state and hands a snapshot to each search. Every
transition returns a new object; nothing here reads or writes storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from StudyFinder.core.query import PageRequest, SearchCriteria, SortDirection, SortSpec


@dataclass(frozen=True, slots=True)
class StudyListState:
    """Snapshot of filters, sort and paging for one search invocation."""

    criteria: SearchCriteria = field(default_factory=SearchCriteria)
    sort: SortSpec = field(default_factory=SortSpec)
    page: PageRequest = field(default_factory=PageRequest)

    def with_sort_toggled(self, field_name: str) -> StudyListState:
        """Cycle the sort on `field_name`: asc, then desc, then no sort.

        Selecting a different field always starts at ascending.
        """
        if field_name != self.sort.field:
            sort = SortSpec(field=field_name, direction=SortDirection.ASC)
        elif self.sort.direction == SortDirection.ASC:
            sort = SortSpec(field=field_name, direction=SortDirection.DESC)
        else:
            sort = SortSpec(field=None, direction=None)
        return replace(self, sort=sort)

    def with_filters(self, **changes: Any) -> StudyListState:
        """Merge filter values and return to the first page."""
        return replace(
            self,
            criteria=replace(self.criteria, **changes),
            page=replace(self.page, page_number=0),
        )

    def with_filters_cleared(self) -> StudyListState:
        return replace(self, criteria=SearchCriteria(), page=replace(self.page, page_number=0))

    def with_page_number(self, page_number: int) -> StudyListState:
        return replace(self, page=replace(self.page, page_number=page_number))

    def with_rows_per_page(self, rows_per_page: int) -> StudyListState:
        return replace(self, page=replace(self.page, rows_per_page=rows_per_page))
