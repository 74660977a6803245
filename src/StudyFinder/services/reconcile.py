from __future__ import annotations

from typing import Iterable, Optional, Sequence

from StudyFinder.core.models import StudyRecord
from StudyFinder.utils.log import log


def reconcile(batches: Iterable[Optional[Sequence[StudyRecord]]]) -> list[StudyRecord]:
    """Flatten result batches and drop repeated studies.

    The first occurrence of each `study_instance_uid` wins; batches are read
    in dispatch order so the outcome does not depend on response timing.
    """
    seen: set[str] = set()
    merged: list[StudyRecord] = []
    total = 0
    for batch in batches:
        if not batch:
            continue
        for record in batch:
            total += 1
            if record.study_instance_uid in seen:
                continue
            seen.add(record.study_instance_uid)
            merged.append(record)

    log.debug("Reconciled %d records into %d unique studies", total, len(merged))
    return merged
