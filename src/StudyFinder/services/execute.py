"""Concurrent execution of decomposed study queries."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol, Sequence

from StudyFinder.core.errors import DecompositionError, RemoteSearchError
from StudyFinder.core.models import StudyRecord
from StudyFinder.core.query import QuerySpec
from StudyFinder.utils.log import log

DEFAULT_MAX_WORKERS = 5


class StudySource(Protocol):
    """Protocol for a remote study catalog supporting single-combination queries."""

    name: str

    def search(self, spec: QuerySpec) -> Sequence[StudyRecord]:
        """Run one query against the catalog."""
        raise NotImplementedError

    def close(self) -> None:
        """Close resources held by source."""
        raise NotImplementedError


def execute(
    specs: Sequence[QuerySpec],
    source: StudySource,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[list[StudyRecord]]:
    """Run every spec concurrently and return result batches in dispatch order.

    All specs are submitted before any result is awaited. A failing query does
    not cancel the others; once every query has finished, any failure aborts
    the whole search.

    Args:
        specs: Query specs from the filter expander.
        source: Remote search capability.
        max_workers: Thread pool size.

    Returns:
        One batch per spec, aligned with `specs`.

    Raises:
        DecompositionError: If `specs` is empty.
        RemoteSearchError: If at least one query failed.
    """
    if not specs:
        raise DecompositionError("At least one query spec is required")

    source_name = getattr(source, "name", "unknown")
    workers = max(1, min(max_workers, len(specs)))
    log.debug("Dispatching %d queries to %s (workers=%d)", len(specs), source_name, workers)

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="study-query") as executor:
        futures: list[Future[Sequence[StudyRecord]]] = [executor.submit(source.search, spec) for spec in specs]

        batches: list[list[StudyRecord]] = []
        failures: dict[int, BaseException] = {}
        for idx, future in enumerate(futures):
            try:
                records = future.result()
            except Exception as error:  # noqa: BLE001 - collected and re-raised below
                failures[idx] = error
                log.warning("Study query failed: source=%s query=%d/%d error=%s", source_name, idx + 1, len(specs), error)
                batches.append([])
                continue
            batches.append(list(records or ()))
            log.debug("Study query completed: source=%s query=%d/%d count=%d", source_name, idx + 1, len(specs), len(batches[-1]))

    if failures:
        raise RemoteSearchError(failures, total=len(specs))
    return batches
