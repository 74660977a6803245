from __future__ import annotations

from typing import Sequence

from StudyFinder.core.models import StudyRecord


def paginate(records: Sequence[StudyRecord], rows_per_page: int) -> list[StudyRecord]:
    """Take at most one page from the front of sorted, reconciled records.

    Each decomposed query asks for a full page at the same offset, so the
    merged set can be larger than a page. Records past the page size are
    dropped rather than carried to the next page.

    Raises:
        ValueError: If `rows_per_page` is not positive.
    """
    if rows_per_page <= 0:
        raise ValueError("rows_per_page must be positive")
    return list(records[:rows_per_page])
