"""Compile `QuerySpec` into QIDO-RS query parameters."""

from __future__ import annotations

from datetime import date

from StudyFinder.core.query import QuerySpec

# StudyDescription, Modality
INCLUDE_FIELDS = ("00081030", "00080060")

_TEXT_PARAMS = (
    ("PatientName", "patient_name"),
    ("PatientID", "patient_id"),
    ("AccessionNumber", "accession_number"),
    ("StudyDescription", "study_description"),
    ("ModalitiesInStudy", "modalities_in_study"),
)


def _dicom_date(value: date) -> str:
    return value.strftime("%Y%m%d")


def compile_qido_params(spec: QuerySpec, *, supports_include_field: bool = True) -> dict[str, str]:
    """Build QIDO-RS `/studies` parameters for one query spec.

    Empty text filters are omitted. Date bounds become an inclusive
    `YYYYMMDD-YYYYMMDD` range.

    Args:
        spec: Query spec to compile.
        supports_include_field: Whether the server accepts a list of tags in
            `includefield`; otherwise `all` is requested.

    Returns:
        Parameter mapping ready for the HTTP client.
    """
    params: dict[str, str] = {}
    for param, attr in _TEXT_PARAMS:
        value = getattr(spec, attr)
        if value:
            params[param] = value

    params["StudyDate"] = f"{_dicom_date(spec.study_date_from)}-{_dicom_date(spec.study_date_to)}"
    params["limit"] = str(spec.limit)
    params["offset"] = str(spec.offset)
    if spec.fuzzy_matching:
        params["fuzzymatching"] = "true"
    params["includefield"] = ",".join(INCLUDE_FIELDS) if supports_include_field else "all"
    return params
