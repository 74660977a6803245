"""Console text output renderer.

Renders a page of `StudyRecord` into human-friendly text.
"""

from __future__ import annotations

from typing import Iterable

from StudyFinder.core.models import StudyRecord


def _fmt(value: str | None) -> str:
    return value if value else "-"


def render_text(studies: Iterable[StudyRecord]) -> str:
    """Render studies into a human-readable text block.

    Args:
        studies: Iterable of study records.

    Returns:
        A formatted string ready to be printed.
    """
    lines: list[str] = []
    for idx, study in enumerate(studies, start=1):
        lines.append(f"{idx}. {_fmt(study.patient_name)} ({_fmt(study.patient_id)})")
        lines.append(f"   Date: {_fmt(study.study_date)}  Modalities: {_fmt(study.modalities)}")
        lines.append(f"   Accession: {_fmt(study.accession_number)}  Description: {_fmt(study.study_description)}")
        lines.append(f"   UID: {study.study_instance_uid}")
    return "\n".join(lines)
