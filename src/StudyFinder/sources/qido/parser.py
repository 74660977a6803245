"""DICOM JSON study parser.

Maps QIDO-RS study results into `StudyRecord` objects.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from StudyFinder.core.models import StudyRecord
from StudyFinder.utils.log import log

TAG_STUDY_INSTANCE_UID = "0020000D"
TAG_STUDY_DATE = "00080020"
TAG_ACCESSION_NUMBER = "00080050"
TAG_MODALITIES_IN_STUDY = "00080061"
TAG_STUDY_DESCRIPTION = "00081030"
TAG_PATIENT_NAME = "00100010"
TAG_PATIENT_ID = "00100020"


def _values(element: Any) -> list[Any]:
    if not isinstance(element, Mapping):
        return []
    values = element.get("Value")
    return list(values) if isinstance(values, list) else []


def _first_string(study: Mapping[str, Any], tag: str) -> str:
    values = _values(study.get(tag))
    if not values or values[0] is None:
        return ""
    return str(values[0])


def _patient_name(study: Mapping[str, Any]) -> Optional[str]:
    """Return the alphabetic component of the PN value, if any.

    Returns:
        Name string such as "DOE^JOHN", or None when absent.
    """
    values = _values(study.get(TAG_PATIENT_NAME))
    if not values:
        return None
    value = values[0]
    if isinstance(value, Mapping):
        value = value.get("Alphabetic")
    return value if isinstance(value, str) else None


def _modalities(study: Mapping[str, Any]) -> str:
    values = [str(v) for v in _values(study.get(TAG_MODALITIES_IN_STUDY)) if v]
    return "\\".join(values)


def parse_qido_study(study: Mapping[str, Any]) -> Optional[StudyRecord]:
    """Parse one DICOM JSON study object.

    Returns:
        StudyRecord, or None when the study has no StudyInstanceUID.
    """
    uid = _first_string(study, TAG_STUDY_INSTANCE_UID)
    if not uid:
        return None
    return StudyRecord(
        study_instance_uid=uid,
        patient_name=_patient_name(study),
        patient_id=_first_string(study, TAG_PATIENT_ID),
        accession_number=_first_string(study, TAG_ACCESSION_NUMBER),
        modalities=_modalities(study),
        study_date=_first_string(study, TAG_STUDY_DATE),
        study_description=_first_string(study, TAG_STUDY_DESCRIPTION),
    )


def parse_qido_studies(payload: Iterable[Mapping[str, Any]]) -> list[StudyRecord]:
    """Parse a QIDO-RS result list, skipping studies without identity."""
    records: list[StudyRecord] = []
    skipped = 0
    for study in payload:
        record = parse_qido_study(study)
        if record is None:
            skipped += 1
            continue
        records.append(record)
    if skipped:
        log.warning("Skipped %d QIDO-RS studies without StudyInstanceUID", skipped)
    return records
