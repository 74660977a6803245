"""Study date normalization and stable sorting of study records."""

from __future__ import annotations

import re
from dataclasses import replace
from datetime import datetime
from typing import Sequence

from StudyFinder.core.models import StudyRecord
from StudyFinder.core.query import SortDirection
from StudyFinder.utils.log import log

# English month abbreviations, independent of LC_TIME.
MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_DISPLAY_DATE_RE = re.compile(r"^([A-Z][a-z]{2}) (\d{2}), (\d{4})$")
_DICOM_DATE_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")

SORTABLE_FIELDS = frozenset(
    {
        "study_instance_uid",
        "patient_name",
        "patient_id",
        "accession_number",
        "modalities",
        "study_date",
        "study_description",
    }
)

# Composite filter keys sort by one concrete column.
SORT_FIELD_ALIASES = {
    "all_fields": "patient_name",
    "patient_name_or_id": "patient_name",
    "accession_or_modality_or_description": "modalities",
}


def parse_study_date(raw: str | None) -> datetime | None:
    """Parse a study date in display ("Jun 28, 2002") or DICOM ("20020628") form.

    Returns:
        Parsed datetime, or None when neither format matches.
    """
    if not raw:
        return None
    value = raw.strip()
    match = _DISPLAY_DATE_RE.match(value)
    if match is not None:
        month_name, day, year = match.groups()
        if month_name not in MONTH_ABBREVIATIONS:
            return None
        month = MONTH_ABBREVIATIONS.index(month_name) + 1
    else:
        match = _DICOM_DATE_RE.match(value)
        if match is None:
            return None
        year, month, day = match.groups()
    try:
        return datetime(int(year), int(month), int(day))
    except ValueError:
        return None


def normalize_study_date(raw: str) -> str:
    """Return `raw` in display format, or unchanged if it cannot be parsed."""
    parsed = parse_study_date(raw)
    if parsed is None:
        if raw:
            log.debug("Unparseable study date kept as-is: %r", raw)
        return raw
    return format_display_date(parsed)


def format_display_date(value: datetime) -> str:
    """Format as "Mon DD, YYYY" using English month names."""
    return f"{MONTH_ABBREVIATIONS[value.month - 1]} {value.day:02d}, {value.year:04d}"


def resolve_sort_field(field: str) -> str:
    """Map composite keys to their sort column and validate the result.

    Raises:
        ValueError: If the field is not sortable.
    """
    resolved = SORT_FIELD_ALIASES.get(field, field)
    if resolved not in SORTABLE_FIELDS:
        raise ValueError(f"Unsupported sort field: {field}")
    return resolved


def sort_records(
    records: Sequence[StudyRecord],
    field: str | None,
    direction: SortDirection | str | None,
) -> list[StudyRecord]:
    """Normalize study dates and stably sort records by one field.

    `desc` puts larger values first, `asc` smaller values first. Records with
    no value for the field, or an unparseable study date when sorting by date,
    keep their relative order after the sorted ones. A None field or direction
    leaves the order untouched.

    Args:
        records: Reconciled records.
        field: Field name or composite key to sort by.
        direction: Sort direction.

    Returns:
        New list of records with normalized study dates.
    """
    normalized = [_with_normalized_date(record) for record in records]
    if field is None or direction is None:
        return normalized

    order = SortDirection(direction)
    column = resolve_sort_field(field)

    ranked: list[tuple[str, StudyRecord]] = []
    unranked: list[StudyRecord] = []
    for record in normalized:
        key = _sort_key(record, column)
        if key is None:
            unranked.append(record)
        else:
            ranked.append((key, record))

    ranked.sort(key=lambda item: item[0], reverse=order is SortDirection.DESC)
    return [record for _, record in ranked] + unranked


def _with_normalized_date(record: StudyRecord) -> StudyRecord:
    normalized = normalize_study_date(record.study_date)
    if normalized == record.study_date:
        return record
    return replace(record, study_date=normalized)


def _sort_key(record: StudyRecord, column: str) -> str | None:
    """Return a comparable key, or None when the record cannot be ranked."""
    value = getattr(record, column)
    if column == "study_date":
        parsed = parse_study_date(value)
        return parsed.isoformat() if parsed is not None else None
    if value is None:
        return None
    return value
