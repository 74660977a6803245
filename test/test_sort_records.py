"""Tests for study date normalization and record sorting."""

from __future__ import annotations

import locale
import sys
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from StudyFinder.core.models import StudyRecord
from StudyFinder.core.query import SortDirection
from StudyFinder.services.sort import normalize_study_date, parse_study_date, resolve_sort_field, sort_records


def _study(uid: str, **kwargs) -> StudyRecord:
    return StudyRecord(study_instance_uid=uid, **kwargs)


def _uids(records) -> list[str]:
    return [r.study_instance_uid for r in records]


class TestNormalizeStudyDate(unittest.TestCase):
    def test_dicom_date_reformatted(self) -> None:
        self.assertEqual(normalize_study_date("20020628"), "Jun 28, 2002")

    def test_display_date_kept(self) -> None:
        self.assertEqual(normalize_study_date("Jun 29, 2002"), "Jun 29, 2002")

    def test_unparseable_date_kept_raw(self) -> None:
        self.assertEqual(normalize_study_date("sometime"), "sometime")
        self.assertEqual(normalize_study_date(""), "")

    def test_compact_date_needs_eight_digits(self) -> None:
        for raw in ("2002628", "200206281", "2002-06-28"):
            with self.subTest(raw=raw):
                self.assertIsNone(parse_study_date(raw))
                self.assertEqual(normalize_study_date(raw), raw)

    def test_impossible_dates_rejected(self) -> None:
        self.assertIsNone(parse_study_date("20020230"))
        self.assertIsNone(parse_study_date("Feb 30, 2002"))
        self.assertIsNone(parse_study_date("Jnu 28, 2002"))

    def test_month_names_ignore_process_locale(self) -> None:
        original = locale.setlocale(locale.LC_TIME)
        try:
            try:
                locale.setlocale(locale.LC_TIME, "de_DE.UTF-8")
            except locale.Error:
                self.skipTest("de_DE.UTF-8 locale not installed")
            self.assertEqual(parse_study_date("Mar 05, 2010"), datetime(2010, 3, 5))
            self.assertEqual(normalize_study_date("20101005"), "Oct 05, 2010")
        finally:
            locale.setlocale(locale.LC_TIME, original)

    def test_formatting_does_not_use_strftime_month(self) -> None:
        with patch("StudyFinder.services.sort.MONTH_ABBREVIATIONS", tuple(f"M{n:02d}" for n in range(1, 13))):
            self.assertEqual(normalize_study_date("20020628"), "M06 28, 2002")


class TestSortRecords(unittest.TestCase):
    def test_study_date_descending_mixed_formats(self) -> None:
        records = [_study("28", study_date="20020628"), _study("29", study_date="Jun 29, 2002")]

        result = sort_records(records, "study_date", SortDirection.DESC)

        self.assertEqual(_uids(result), ["29", "28"])
        self.assertEqual(result[1].study_date, "Jun 28, 2002")

    def test_study_date_ascending_compares_chronologically(self) -> None:
        records = [
            _study("a", study_date="Feb 01, 2003"),
            _study("b", study_date="20021231"),
            _study("c", study_date="Apr 10, 2001"),
        ]

        result = sort_records(records, "study_date", "asc")

        self.assertEqual(_uids(result), ["c", "b", "a"])

    def test_text_field_directions(self) -> None:
        records = [_study("1", patient_name="B"), _study("2", patient_name="C"), _study("3", patient_name="A")]

        self.assertEqual(_uids(sort_records(records, "patient_name", "desc")), ["2", "1", "3"])
        self.assertEqual(_uids(sort_records(records, "patient_name", "asc")), ["3", "1", "2"])

    def test_stable_for_equal_keys(self) -> None:
        records = [_study("1", modalities="MR"), _study("2", modalities="CT"), _study("3", modalities="MR")]

        self.assertEqual(_uids(sort_records(records, "modalities", "desc")), ["1", "3", "2"])
        self.assertEqual(_uids(sort_records(records, "modalities", "asc")), ["2", "1", "3"])

    def test_no_direction_or_field_keeps_order(self) -> None:
        records = [_study("2", patient_name="B"), _study("1", patient_name="A")]

        self.assertEqual(_uids(sort_records(records, "patient_name", None)), ["2", "1"])
        self.assertEqual(_uids(sort_records(records, None, "asc")), ["2", "1"])

    def test_sorting_is_idempotent(self) -> None:
        records = [
            _study("a", study_date="20010101", patient_name="X"),
            _study("b", study_date="Mar 03, 2003", patient_name="Y"),
            _study("c", study_date="bogus", patient_name="X"),
            _study("d", study_date="20010101", patient_name=None),
        ]
        for field in ("study_date", "patient_name"):
            for direction in ("asc", "desc"):
                with self.subTest(field=field, direction=direction):
                    once = sort_records(records, field, direction)
                    self.assertEqual(sort_records(once, field, direction), once)

    def test_unparseable_dates_follow_sorted_records(self) -> None:
        records = [
            _study("bad1", study_date="??"),
            _study("old", study_date="19990101"),
            _study("bad2", study_date=""),
            _study("new", study_date="20200101"),
        ]

        self.assertEqual(_uids(sort_records(records, "study_date", "desc")), ["new", "old", "bad1", "bad2"])
        self.assertEqual(_uids(sort_records(records, "study_date", "asc")), ["old", "new", "bad1", "bad2"])

    def test_missing_patient_name_sorts_last(self) -> None:
        records = [_study("none", patient_name=None), _study("a", patient_name="A")]

        self.assertEqual(_uids(sort_records(records, "patient_name", "asc")), ["a", "none"])

    def test_composite_keys_remapped(self) -> None:
        self.assertEqual(resolve_sort_field("patient_name_or_id"), "patient_name")
        self.assertEqual(resolve_sort_field("all_fields"), "patient_name")
        self.assertEqual(resolve_sort_field("accession_or_modality_or_description"), "modalities")

        records = [_study("1", modalities="CT"), _study("2", modalities="MR")]
        result = sort_records(records, "accession_or_modality_or_description", "desc")
        self.assertEqual(_uids(result), ["2", "1"])

    def test_unknown_field_rejected(self) -> None:
        with self.assertRaises(ValueError):
            sort_records([_study("1")], "shoe_size", "asc")


if __name__ == "__main__":
    unittest.main()
