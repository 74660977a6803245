"""Debounced search submission.

Rapid filter edits collapse into the last submission; an explicit flush runs
the pending search immediately. Results of superseded searches are dropped.
"""

from __future__ import annotations

import itertools
import threading
from typing import Callable, Optional

from StudyFinder.core.query import DensityMode
from StudyFinder.core.state import StudyListState
from StudyFinder.services.search import SearchOutcome, StudySearchService
from StudyFinder.utils.log import log

DEFAULT_DEBOUNCE_SECONDS = 0.225

ResultCallback = Callable[[int, SearchOutcome], None]


class DebouncedSearch:
    """Schedule searches on a cancellable timer.

    Each submission gets an increasing token. A result is delivered to
    `on_result` only while its token is still the latest one submitted.
    """

    def __init__(
        self,
        service: StudySearchService,
        *,
        density: DensityMode | str,
        on_result: ResultCallback | None = None,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self.service = service
        self.density = DensityMode(density)
        self.on_result = on_result
        self.delay = delay
        self.latest_outcome: Optional[SearchOutcome] = None

        self._lock = threading.Lock()
        self._tokens = itertools.count(1)
        self._latest_token = 0
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[tuple[int, StudyListState]] = None

    def submit(self, state: StudyListState, *, flush: bool = False) -> int:
        """Schedule a search for `state`, replacing any pending one.

        Args:
            state: Snapshot to search with.
            flush: Run immediately instead of waiting for the delay.

        Returns:
            Token identifying this submission.
        """
        with self._lock:
            self._cancel_timer()
            token = next(self._tokens)
            self._latest_token = token
            if flush:
                self._pending = None
            else:
                self._pending = (token, state)
                self._timer = threading.Timer(self.delay, self._fire, args=(token,))
                self._timer.daemon = True
                self._timer.start()
        if flush:
            self._run(token, state)
        return token

    def flush(self) -> Optional[SearchOutcome]:
        """Run the pending search now, if any, in the calling thread."""
        with self._lock:
            self._cancel_timer()
            pending = self._pending
            self._pending = None
        if pending is None:
            return None
        return self._run(*pending)

    def cancel(self) -> None:
        """Drop the pending search without running it."""
        with self._lock:
            self._cancel_timer()
            self._pending = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def _fire(self, token: int) -> None:
        with self._lock:
            pending = self._pending
            if pending is None or pending[0] != token:
                return
            self._pending = None
            self._timer = None
        self._run(*pending)

    def _run(self, token: int, state: StudyListState) -> SearchOutcome:
        outcome = self.service.search(state, self.density)
        with self._lock:
            stale = token != self._latest_token
            if not stale:
                self.latest_outcome = outcome
        if stale:
            log.debug("Discarding stale search result: token=%d latest=%d", token, self._latest_token)
            return outcome
        if self.on_result is not None:
            self.on_result(token, outcome)
        return outcome

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
