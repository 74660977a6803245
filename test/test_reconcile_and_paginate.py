"""Tests for batch reconciliation and page truncation."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from StudyFinder.core.models import StudyRecord
from StudyFinder.services.paginate import paginate
from StudyFinder.services.reconcile import reconcile


def _study(uid: str, **kwargs) -> StudyRecord:
    return StudyRecord(study_instance_uid=uid, **kwargs)


class TestReconcile(unittest.TestCase):
    def test_first_occurrence_wins_in_batch_order(self) -> None:
        first_b = _study("B", patient_name="FIRST")
        batches = [[_study("A"), first_b], [_study("B", patient_name="SECOND"), _study("C")]]

        result = reconcile(batches)

        self.assertEqual([r.study_instance_uid for r in result], ["A", "B", "C"])
        self.assertIs(result[1], first_b)

    def test_identity_is_the_only_key(self) -> None:
        result = reconcile([[_study("A", patient_id="1"), _study("B", patient_id="1")]])

        self.assertEqual(len(result), 2)

    def test_empty_and_missing_batches(self) -> None:
        self.assertEqual(reconcile([]), [])
        self.assertEqual([r.study_instance_uid for r in reconcile([None, [], [_study("A")]])], ["A"])

    def test_duplicates_inside_one_batch(self) -> None:
        result = reconcile([[_study("A"), _study("A"), _study("B")]])

        self.assertEqual([r.study_instance_uid for r in result], ["A", "B"])


class TestPaginate(unittest.TestCase):
    def test_takes_first_page_of_thirty(self) -> None:
        records = [_study(f"{i:02d}") for i in range(30)]

        page = paginate(records, 25)

        self.assertEqual(page, records[:25])

    def test_short_input_returned_whole(self) -> None:
        records = [_study("A"), _study("B")]

        self.assertEqual(paginate(records, 25), records)
        self.assertEqual(paginate([], 25), [])

    def test_non_positive_page_size_rejected(self) -> None:
        with self.assertRaises(ValueError):
            paginate([_study("A")], 0)


if __name__ == "__main__":
    unittest.main()
