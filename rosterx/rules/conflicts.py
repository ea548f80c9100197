"""Uniqueness and saturation checks over an assignment store."""
from __future__ import annotations

from datetime import date
from typing import Collection, Iterable, List, Sequence, Set, Tuple

from ..domain.models import BatchRequest, PivotType, SkippedPair
from ..domain.store import AssignmentStore, TripleKey

ALREADY_ASSIGNED = "already assigned"
DUPLICATE_IN_BATCH = "duplicate in request"


def exists(
    store: AssignmentStore,
    staff_id: str,
    shift_id: str,
    work_date: date,
    pending: Collection[TripleKey] = (),
) -> bool:
    """True if the triple is loaded in *store* or already queued in *pending*."""

    return store.contains(staff_id, shift_id, work_date) or (staff_id, shift_id, work_date) in pending


def is_row_date_saturated(
    store: AssignmentStore,
    pivot: PivotType,
    row_id: str,
    day: date,
    active_counterpart_ids: Iterable[str],
) -> bool:
    """True when every active counterpart already holds an assignment in the cell.

    An empty active set leaves nothing to add, so the cell counts as saturated.
    """

    assigned = {pivot.counterpart_id_of(a) for a in store.for_row(pivot, row_id, day)}
    return all(counterpart_id in assigned for counterpart_id in active_counterpart_ids)


def partition_pairs(
    store: AssignmentStore,
    request: BatchRequest,
    dates: Sequence[date],
) -> Tuple[List[TripleKey], List[SkippedPair]]:
    """Split the request's (counterpart, date) pairs into new and skipped.

    Pairs are visited counterpart-major, in request order, so the accepted
    list is deterministic for a given request.
    """

    accepted: List[TripleKey] = []
    pending: Set[TripleKey] = set()
    skipped: List[SkippedPair] = []
    for counterpart_id in request.counterpart_ids:
        staff_id, shift_id = request.pivot.triple_ids(request.row_id, counterpart_id)
        for day in dates:
            key = (staff_id, shift_id, day)
            if exists(store, staff_id, shift_id, day):
                skipped.append(SkippedPair(staff_id, shift_id, day, ALREADY_ASSIGNED))
            elif key in pending:
                skipped.append(SkippedPair(staff_id, shift_id, day, DUPLICATE_IN_BATCH))
            else:
                pending.add(key)
                accepted.append(key)
    return accepted, skipped


__all__ = ["ALREADY_ASSIGNED", "DUPLICATE_IN_BATCH", "exists", "is_row_date_saturated", "partition_pairs"]
