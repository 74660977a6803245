"""Expand composite filters into single-combination remote queries.

The remote catalog cannot OR across independent fields, so a value typed into
a composite box is tried once per underlying field. Which composite applies
depends on the presentation density.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from typing import Sequence

from StudyFinder.core.query import DensityMode, PageRequest, QuerySpec, SearchCriteria

DEFAULT_LOOKBACK_DAYS = 25000

ALL_FIELDS_GROUP: tuple[str, ...] = (
    "patient_id",
    "patient_name",
    "accession_number",
    "study_description",
    "modalities_in_study",
)
NAME_OR_ID_GROUP: tuple[str, ...] = ("patient_id", "patient_name")
ACCESSION_OR_MODALITY_OR_DESCRIPTION_GROUP: tuple[str, ...] = (
    "accession_number",
    "study_description",
    "modalities_in_study",
)

_TEXT_FIELDS_CLEARED = {name: "" for name in ALL_FIELDS_GROUP}


def expand(
    criteria: SearchCriteria,
    density: DensityMode | str,
    *,
    page: PageRequest | None = None,
    fuzzy_matching: bool = False,
    today: date | None = None,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> list[QuerySpec]:
    """Build the list of remote queries needed to satisfy `criteria`.

    Args:
        criteria: User filter values, including composites.
        density: Presentation density deciding which composite is used.
        page: Paging bounds copied onto every spec. Defaults to the first page.
        fuzzy_matching: Whether the connection supports fuzzy matching.
        today: Reference date for default date bounds.
        lookback_days: Days before `today` used when no lower bound is given.

    Returns:
        One or more query specs, in fixed field order.

    Raises:
        ValueError: If `density` is not a known density mode.
    """
    mode = DensityMode(density)
    base = _base_spec(
        criteria,
        page=page or PageRequest(),
        fuzzy_matching=fuzzy_matching,
        today=today or date.today(),
        lookback_days=lookback_days,
    )

    specs: list[QuerySpec] = []
    if mode is DensityMode.COMPACT:
        specs = _specs_for_value(base, ALL_FIELDS_GROUP, criteria.all_fields)
    elif mode is DensityMode.STANDARD:
        specs = _specs_for_value(base, NAME_OR_ID_GROUP, criteria.patient_name_or_id) + _specs_for_value(
            base,
            ACCESSION_OR_MODALITY_OR_DESCRIPTION_GROUP,
            criteria.accession_or_modality_or_description,
        )

    if not specs:
        specs = [base]
    return specs


def _base_spec(
    criteria: SearchCriteria,
    *,
    page: PageRequest,
    fuzzy_matching: bool,
    today: date,
    lookback_days: int,
) -> QuerySpec:
    """Build the single spec carrying the plain scalar filters."""
    return QuerySpec(
        patient_id=criteria.patient_id,
        patient_name=criteria.patient_name,
        accession_number=criteria.accession_number,
        study_description=criteria.study_description,
        modalities_in_study=criteria.modalities,
        study_date_from=criteria.study_date_from or today - timedelta(days=lookback_days),
        study_date_to=criteria.study_date_to or today,
        limit=page.rows_per_page,
        offset=page.offset,
        fuzzy_matching=fuzzy_matching,
    )


def _specs_for_value(base: QuerySpec, fields: Sequence[str], value: str) -> list[QuerySpec]:
    """Return one spec per field with only that text field set to `value`.

    Date bounds, paging and fuzzy matching are inherited from `base`.
    """
    if not value:
        return []
    cleared = replace(base, **_TEXT_FIELDS_CLEARED)
    return [replace(cleared, **{field: value}) for field in fields]
