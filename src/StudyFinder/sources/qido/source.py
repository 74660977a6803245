"""DICOMweb study source adapter.

Composes query compilation, HTTP fetching, and DICOM JSON parsing into a
`StudySource` implementation.
"""

from __future__ import annotations

from dataclasses import dataclass

from StudyFinder.core.models import StudyRecord
from StudyFinder.core.query import QuerySpec
from StudyFinder.sources.qido.client import QidoApiClient
from StudyFinder.sources.qido.parser import parse_qido_studies
from StudyFinder.sources.qido.query import compile_qido_params
from StudyFinder.utils.log import log


@dataclass(slots=True)
class QidoSource:
    """`StudySource` implementation backed by a QIDO-RS endpoint."""

    client: QidoApiClient
    name: str = "dicomweb"
    supports_include_field: bool = True

    def search(self, spec: QuerySpec) -> list[StudyRecord]:
        """Run one study query.

        Args:
            spec: Single-combination query.

        Returns:
            Parsed study records in server order.
        """
        params = compile_qido_params(spec, supports_include_field=self.supports_include_field)
        payload = self.client.search_studies(params)
        records = parse_qido_studies(payload)
        log.debug("QIDO-RS query returned %d studies", len(records))
        return records

    def close(self) -> None:
        self.client.close()
