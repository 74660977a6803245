from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

DEFAULT_ROWS_PER_PAGE = 25
DEFAULT_PAGE_NUMBER = 0

# Viewport breakpoints (px) separating the presentation densities.
FULL_MIN_WIDTH = 1750
STANDARD_MIN_WIDTH = 1000


class DensityMode(str, Enum):
    """How many independent filter inputs the presentation can show.

    - `COMPACT`: a single box matching every field.
    - `STANDARD`: two boxes, name-or-id and accession-or-modality-or-description.
    - `FULL`: one input per real field.
    """

    COMPACT = "compact"
    STANDARD = "standard"
    FULL = "full"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def density_for_width(width: int) -> DensityMode:
    """Map a viewport width in pixels to a density mode."""
    if width >= FULL_MIN_WIDTH:
        return DensityMode.FULL
    if width >= STANDARD_MIN_WIDTH:
        return DensityMode.STANDARD
    return DensityMode.COMPACT


@dataclass(frozen=True, slots=True)
class SearchCriteria:
    """Filter values entered by the user.

    The first seven attributes map onto remote-queryable fields. The last three
    are composite fields: a value meant to match any of several real fields.
    Composites are never sent to the remote catalog; they only drive query
    expansion.
    """

    patient_id: str = ""
    patient_name: str = ""
    accession_number: str = ""
    study_description: str = ""
    modalities: str = ""
    study_date_from: Optional[date] = None
    study_date_to: Optional[date] = None

    patient_name_or_id: str = ""
    accession_or_modality_or_description: str = ""
    all_fields: str = ""


@dataclass(frozen=True, slots=True)
class QuerySpec:
    """One remote-compatible filter combination.

    Text fields left empty are not sent to the remote. Date bounds are
    inclusive.
    """

    study_date_from: date
    study_date_to: date
    limit: int
    offset: int = 0
    patient_id: str = ""
    patient_name: str = ""
    accession_number: str = ""
    study_description: str = ""
    modalities_in_study: str = ""
    fuzzy_matching: bool = False


@dataclass(frozen=True, slots=True)
class SortSpec:
    """Active sort. A None field or direction means no sort is applied."""

    field: Optional[str] = "patient_name"
    direction: Optional[SortDirection] = SortDirection.DESC

    @property
    def active(self) -> bool:
        return self.field is not None and self.direction is not None


@dataclass(frozen=True, slots=True)
class PageRequest:
    """Zero-based page index and rows per page."""

    page_number: int = DEFAULT_PAGE_NUMBER
    rows_per_page: int = DEFAULT_ROWS_PER_PAGE

    def __post_init__(self) -> None:
        if self.page_number < 0:
            raise ValueError("page_number must be >= 0")
        if self.rows_per_page <= 0:
            raise ValueError("rows_per_page must be positive")

    @property
    def offset(self) -> int:
        return self.page_number * self.rows_per_page
