"""JSON output renderer.

Renders a search outcome into JSON-serializable objects.
"""

from __future__ import annotations

from typing import Any, Iterable

from StudyFinder.core.models import StudyRecord
from StudyFinder.services.search import SearchOutcome


def render_json(studies: Iterable[StudyRecord]) -> list[dict[str, Any]]:
    """Render studies into JSON-serializable dicts."""
    return [
        {
            "studyInstanceUid": study.study_instance_uid,
            "patientName": study.patient_name,
            "patientId": study.patient_id,
            "accessionNumber": study.accession_number,
            "modalities": study.modalities,
            "studyDate": study.study_date,
            "studyDescription": study.study_description,
        }
        for study in studies
    ]


def render_outcome(outcome: SearchOutcome) -> dict[str, Any]:
    """Render a search outcome with its status flags."""
    return {
        "isSearching": outcome.is_searching,
        "error": str(outcome.error) if outcome.error is not None else None,
        "count": len(outcome.studies),
        "studies": render_json(outcome.studies),
    }
