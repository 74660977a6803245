from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class StudyRecord:
    """Projected summary of one study returned by the remote catalog.

    Only the fields the study list displays or sorts by are kept.

    Attributes:
        study_instance_uid: Globally unique study identifier. Sole dedup key.
        patient_name: Patient name, or None when the remote omits it.
        patient_id: Patient identifier.
        accession_number: Accession number.
        modalities: Modalities in study, backslash separated (e.g. "SEG\\MR").
        study_date: Study date as raw text, either "YYYYMMDD" or "Mon DD, YYYY".
        study_description: Free text study description.
    """

    study_instance_uid: str
    patient_name: Optional[str] = None
    patient_id: str = ""
    accession_number: str = ""
    modalities: str = ""
    study_date: str = ""
    study_description: str = ""

    def __post_init__(self) -> None:
        if not self.study_instance_uid:
            raise ValueError("StudyRecord.study_instance_uid must not be empty")
