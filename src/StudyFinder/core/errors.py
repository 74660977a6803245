"""Error types raised by the study search pipeline."""

from __future__ import annotations

from typing import Mapping


class StudySearchError(Exception):
    """Base error for a search that could not produce a result page."""


class DecompositionError(StudySearchError):
    """Raised when filter expansion yields no query; indicates a defect."""


class RemoteSearchError(StudySearchError):
    """One or more decomposed remote queries failed.

    Attributes:
        failures: Mapping of spec position (dispatch order) to the exception
            raised by the remote search for that spec.
        total: Number of specs that were dispatched.
    """

    def __init__(self, failures: Mapping[int, BaseException], *, total: int) -> None:
        self.failures = dict(failures)
        self.total = total
        causes = "; ".join(f"#{idx}: {err}" for idx, err in sorted(self.failures.items()))
        super().__init__(f"Remote search failed for {len(self.failures)}/{total} queries: {causes}")

    @property
    def cause(self) -> BaseException | None:
        """Return the first failure in dispatch order."""
        if not self.failures:
            return None
        return self.failures[min(self.failures)]
