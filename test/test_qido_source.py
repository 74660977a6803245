"""Tests for the DICOMweb QIDO-RS source."""

from __future__ import annotations

import sys
import unittest
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from StudyFinder.core.query import QuerySpec
from StudyFinder.sources.qido.client import QidoApiClient
from StudyFinder.sources.qido.parser import parse_qido_studies
from StudyFinder.sources.qido.query import compile_qido_params
from StudyFinder.sources.qido.source import QidoSource
from StudyFinder.config import ServerConfig
from StudyFinder.sources.registry import build_source, supported_source_kinds

STUDY_JSON = {
    "0020000D": {"vr": "UI", "Value": ["1.2.840.1"]},
    "00080020": {"vr": "DA", "Value": ["20020628"]},
    "00080050": {"vr": "SH", "Value": ["ACC1"]},
    "00080061": {"vr": "CS", "Value": ["SEG", "MR"]},
    "00081030": {"vr": "LO", "Value": ["BRAIN"]},
    "00100010": {"vr": "PN", "Value": [{"Alphabetic": "NAME^NONE"}]},
    "00100020": {"vr": "LO", "Value": ["NOID"]},
}


def _spec(**kwargs) -> QuerySpec:
    return QuerySpec(study_date_from=date(1956, 1, 1), study_date_to=date(2024, 3, 15), limit=25, **kwargs)


def _response(status: int, payload=None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.content = b"[]" if payload is not None else b""
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(f"HTTP {status}", response=resp)
    return resp


class TestCompileQidoParams(unittest.TestCase):
    def test_empty_text_filters_omitted(self) -> None:
        params = compile_qido_params(_spec(patient_name="SMITH", offset=50))

        self.assertEqual(
            params,
            {
                "PatientName": "SMITH",
                "StudyDate": "19560101-20240315",
                "limit": "25",
                "offset": "50",
                "includefield": "00081030,00080060",
            },
        )

    def test_fuzzy_and_include_all(self) -> None:
        params = compile_qido_params(_spec(modalities_in_study="CT", fuzzy_matching=True), supports_include_field=False)

        self.assertEqual(params["ModalitiesInStudy"], "CT")
        self.assertEqual(params["fuzzymatching"], "true")
        self.assertEqual(params["includefield"], "all")


class TestParseQidoStudies(unittest.TestCase):
    def test_maps_dicom_json(self) -> None:
        (record,) = parse_qido_studies([STUDY_JSON])

        self.assertEqual(record.study_instance_uid, "1.2.840.1")
        self.assertEqual(record.patient_name, "NAME^NONE")
        self.assertEqual(record.patient_id, "NOID")
        self.assertEqual(record.accession_number, "ACC1")
        self.assertEqual(record.modalities, "SEG\\MR")
        self.assertEqual(record.study_date, "20020628")
        self.assertEqual(record.study_description, "BRAIN")

    def test_missing_values_and_identity(self) -> None:
        sparse = {"0020000D": {"vr": "UI", "Value": ["1.2.3"]}, "00100010": {"vr": "PN"}}
        no_uid = {"00100020": {"vr": "LO", "Value": ["X"]}}

        records = parse_qido_studies([sparse, no_uid])

        self.assertEqual(len(records), 1)
        self.assertIsNone(records[0].patient_name)
        self.assertEqual(records[0].study_date, "")


class TestQidoApiClient(unittest.TestCase):
    def test_search_studies_returns_payload(self) -> None:
        client = QidoApiClient("https://pacs.example/rs/", auth_token="secret")
        client._session = MagicMock()
        client._session.get.return_value = _response(200, [STUDY_JSON])

        payload = client.search_studies({"limit": "1"})

        self.assertEqual(payload, [STUDY_JSON])
        args, kwargs = client._session.get.call_args
        self.assertEqual(args[0], "https://pacs.example/rs/studies")
        self.assertEqual(kwargs["params"], {"limit": "1"})

    def test_auth_header_set(self) -> None:
        client = QidoApiClient("https://pacs.example/rs", auth_token="secret")

        self.assertEqual(client._session.headers["Authorization"], "Bearer secret")
        client.close()

    def test_no_content_is_empty(self) -> None:
        client = QidoApiClient("https://pacs.example/rs")
        client._session = MagicMock()
        client._session.get.return_value = _response(204)

        self.assertEqual(client.search_studies({}), [])

    @patch("StudyFinder.sources.qido.client.time.sleep")
    def test_retries_transient_status_then_succeeds(self, sleep_mock) -> None:
        client = QidoApiClient("https://pacs.example/rs")
        client._session = MagicMock()
        client._session.get.side_effect = [_response(503), _response(200, [])]

        self.assertEqual(client.search_studies({}), [])
        self.assertEqual(client._session.get.call_count, 2)
        sleep_mock.assert_called_once()

    @patch("StudyFinder.sources.qido.client.time.sleep")
    def test_gives_up_after_max_attempts(self, sleep_mock) -> None:
        client = QidoApiClient("https://pacs.example/rs", max_attempts=3)
        client._session = MagicMock()
        client._session.get.side_effect = requests.exceptions.ConnectionError("refused")

        with self.assertRaises(requests.exceptions.ConnectionError):
            client.search_studies({})
        self.assertEqual(client._session.get.call_count, 3)
        self.assertEqual(sleep_mock.call_count, 2)

    def test_client_error_not_retried(self) -> None:
        client = QidoApiClient("https://pacs.example/rs")
        client._session = MagicMock()
        client._session.get.return_value = _response(400)

        with self.assertRaises(requests.exceptions.HTTPError):
            client.search_studies({})
        self.assertEqual(client._session.get.call_count, 1)


class TestQidoSource(unittest.TestCase):
    def test_search_compiles_fetches_and_parses(self) -> None:
        client = MagicMock(spec=QidoApiClient)
        client.search_studies.return_value = [STUDY_JSON]
        source = QidoSource(client=client, supports_include_field=False)

        records = source.search(_spec(patient_id="NOID"))

        self.assertEqual([r.study_instance_uid for r in records], ["1.2.840.1"])
        params = client.search_studies.call_args.args[0]
        self.assertEqual(params["PatientID"], "NOID")
        self.assertEqual(params["includefield"], "all")

        source.close()
        client.close.assert_called_once()


class TestSourceRegistry(unittest.TestCase):
    def _config(self, **kwargs) -> ServerConfig:
        values = {
            "kind": "dicomweb",
            "name": "pacs",
            "qido_root": "https://pacs.example/rs",
            "supports_fuzzy_matching": False,
            "supports_include_field": False,
            "timeout": 5.0,
            "auth_token_env": None,
        }
        values.update(kwargs)
        return ServerConfig(**values)

    def test_builds_qido_source_with_env_token(self) -> None:
        with patch.dict("os.environ", {"PACS_TOKEN": "tok"}):
            source = build_source(self._config(auth_token_env="PACS_TOKEN"))

        self.assertIsInstance(source, QidoSource)
        self.assertEqual(source.name, "pacs")
        self.assertFalse(source.supports_include_field)
        self.assertEqual(source.client._session.headers["Authorization"], "Bearer tok")
        source.close()

    def test_unknown_kind_rejected(self) -> None:
        self.assertEqual(supported_source_kinds(), ("dicomweb",))
        with self.assertRaises(ValueError):
            build_source(self._config(kind="ftp"))


if __name__ == "__main__":
    unittest.main()
