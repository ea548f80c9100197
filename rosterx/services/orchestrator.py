"""Roster board: week navigation, batch creation and deletion of assignments."""
from __future__ import annotations

import logging
import threading
from collections import defaultdict
from contextlib import ExitStack
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Collection, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..domain.models import (
    Assignment,
    BatchOutcome,
    BatchRequest,
    PivotType,
    Recurrence,
    Shift,
    SkippedPair,
    Staff,
)
from ..domain.store import AssignmentStore, TripleKey
from ..domain.week import MONDAY, WeekWindow, shift_window, window_for
from ..errors import EmptyCounterpartSet, InvalidSelection, UnknownAssignmentError
from ..rules import conflicts, recurrence
from .gateway import ScheduleGateway
from .grid import Grid, build_grid, sort_roster
from .locks import KeyedLocks

logger = logging.getLogger(__name__)

Entity = Union[Staff, Shift]


class BoardState(str, Enum):
    IDLE = "idle"
    COMPOSING = "composing"
    SUBMITTING = "submitting"


@dataclass(frozen=True)
class Composition:
    """A selected (row, date) cell and the counterparts that can still be added."""

    pivot: PivotType
    row_id: str
    work_date: date
    available: Tuple[Entity, ...]


class RosterBoard:
    """Keeps one week of assignments in sync with a :class:`ScheduleGateway`.

    The board owns an :class:`AssignmentStore` that is rebuilt whenever the
    window moves. Writes are serialised per ``(pivot, row, date)`` through a
    :class:`KeyedLocks` registry that may be shared between boards.
    """

    def __init__(
        self,
        gateway: ScheduleGateway,
        *,
        pivot: PivotType = PivotType.STAFF,
        week_start: int = MONDAY,
        locks: Optional[KeyedLocks] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.gateway = gateway
        self.pivot = pivot
        self.week_start = week_start
        self.locks = locks if locks is not None else KeyedLocks()
        self.store = AssignmentStore()
        self.window: Optional[WeekWindow] = None
        self.staff: List[Staff] = []
        self.shifts: List[Shift] = []
        self.state = BoardState.IDLE
        self.selection: Optional[Composition] = None
        self._today = today
        self._guard = threading.RLock()
        self._generation = 0

    # -- Window management --------------------------------------------------------
    def load(self, anchor: date) -> WeekWindow:
        window = window_for(anchor, self.week_start)
        assignments = self.gateway.fetch_assignments(window.start, window.end)
        shifts = self.gateway.fetch_shifts()
        staff = self.gateway.fetch_staff()
        with self._guard:
            self._generation += 1
            self.window = window
            self.shifts = list(shifts)
            self.staff = list(staff)
            self.store.replace_all(assignments, window=window)
            self.state = BoardState.IDLE
            self.selection = None
        logger.debug(
            "Loaded window %s..%s: %d assignments, %d staff, %d shifts",
            window.start, window.end, self.store.size, len(staff), len(shifts),
        )
        return window

    def refresh(self) -> WeekWindow:
        return self.load(self._require_window().start)

    def navigate(self, weeks: int) -> WeekWindow:
        return self.load(shift_window(self._require_window(), weeks).start)

    def this_week(self) -> WeekWindow:
        return self.load(self._today())

    def set_pivot(self, pivot: PivotType) -> None:
        self.pivot = pivot
        if self.window is not None:
            self.refresh()

    def grid(self, staff_filter: Optional[Collection[str]] = None) -> Grid:
        window = self._require_window()
        with self._guard:
            return build_grid(self.pivot, self.staff, self.shifts, window, self.store, staff_filter=staff_filter)

    # -- Composing ----------------------------------------------------------------
    def select_cell(self, row_id: str, work_date: date) -> Composition:
        window = self._require_window()
        if work_date not in window:
            raise InvalidSelection(f"{work_date.isoformat()} is outside the visible week")
        self._require_active(self.pivot, [row_id])

        cell = self.grid().cell(row_id, work_date)
        if cell is None or not cell.can_add_more:
            raise InvalidSelection("Every active counterpart is already assigned to this cell")
        by_id = {entity.id: entity for entity in self._roster(self.pivot.counterpart)}
        self.selection = Composition(
            pivot=self.pivot,
            row_id=row_id,
            work_date=work_date,
            available=tuple(by_id[cid] for cid in cell.available_counterpart_ids),
        )
        self.state = BoardState.COMPOSING
        return self.selection

    def cancel(self) -> None:
        self.selection = None
        self.state = BoardState.IDLE

    def request_for_selection(
        self,
        counterpart_ids: Iterable[str],
        *,
        note: Optional[str] = None,
        repeat: Optional[Recurrence] = None,
    ) -> BatchRequest:
        if self.selection is None:
            raise InvalidSelection("Pick a row and a date first")
        return BatchRequest(
            pivot=self.selection.pivot,
            row_id=self.selection.row_id,
            counterpart_ids=tuple(counterpart_ids),
            work_date=self.selection.work_date,
            note=note,
            recurrence=repeat,
        )

    # -- Writes -------------------------------------------------------------------
    def submit(self, request: BatchRequest) -> BatchOutcome:
        """Expand, validate and create a batch; conflicting pairs are skipped."""

        if not request.counterpart_ids:
            raise EmptyCounterpartSet()
        dates = recurrence.resolve_dates(request.work_date, request.recurrence)
        self._require_window()
        self._require_active(request.pivot, [request.row_id])
        self._require_active(request.pivot.counterpart, request.counterpart_ids)

        unique_ids = tuple(dict.fromkeys(request.counterpart_ids))
        if unique_ids != request.counterpart_ids:
            request = BatchRequest(
                pivot=request.pivot,
                row_id=request.row_id,
                counterpart_ids=unique_ids,
                work_date=request.work_date,
                note=request.note,
                recurrence=request.recurrence,
            )

        self.state = BoardState.SUBMITTING
        succeeded = False
        try:
            with self.locks.hold(request.lock_key):
                generation = self._generation
                snapshot = AssignmentStore(self.gateway.fetch_assignments(dates[0], dates[-1]))
                accepted, skipped = conflicts.partition_pairs(snapshot, request, dates)
                outcome = BatchOutcome(skipped=skipped)
                if accepted:
                    outcome.created = self._create(request, accepted)
                    created_keys = {a.key for a in outcome.created}
                    outcome.skipped.extend(
                        SkippedPair(staff_id, shift_id, day, conflicts.ALREADY_ASSIGNED)
                        for staff_id, shift_id, day in accepted
                        if (staff_id, shift_id, day) not in created_keys
                    )
                # merge only after every gateway call succeeded
                self._merge(snapshot.iter_assignments(), generation)
                self._merge(outcome.created, generation)
            succeeded = True
        finally:
            self.state = BoardState.IDLE if succeeded else BoardState.COMPOSING
        if succeeded:
            self.selection = None

        logger.info(
            "Batch %s %s on %s: created %d, skipped %d",
            request.pivot.value, request.row_id, request.work_date,
            outcome.created_count, outcome.skipped_count,
        )
        return outcome

    def delete(self, assignment_id: str) -> Optional[Assignment]:
        """Delete exactly one assignment; other dates of a series are untouched."""

        record = self.store.find(assignment_id)
        with ExitStack() as stack:
            if record is not None:
                for key in sorted(_lock_keys(record)):
                    stack.enter_context(self.locks.hold(key))
            if not self.gateway.delete_assignment(assignment_id):
                raise UnknownAssignmentError(f"Assignment {assignment_id} does not exist")
            with self._guard:
                self.store.remove(assignment_id)
        logger.info("Deleted assignment %s", assignment_id)
        return record

    # -- Internals ----------------------------------------------------------------
    def _create(self, request: BatchRequest, accepted: Sequence[TripleKey]) -> List[Assignment]:
        dates_by_counterpart: Dict[str, List[date]] = defaultdict(list)
        for staff_id, shift_id, day in accepted:
            counterpart_id = shift_id if request.pivot is PivotType.STAFF else staff_id
            dates_by_counterpart[counterpart_id].append(day)

        groups: Dict[Tuple[date, ...], List[str]] = defaultdict(list)
        for counterpart_id, days in dates_by_counterpart.items():
            groups[tuple(days)].append(counterpart_id)

        created: List[Assignment] = []
        for days, counterpart_ids in groups.items():
            created.extend(
                self.gateway.create_assignments(
                    request.pivot, request.row_id, counterpart_ids, list(days), request.note
                )
            )
        return created

    def _merge(self, assignments: Iterable[Assignment], generation: int) -> None:
        with self._guard:
            window = self.window
            discarded = 0
            for assignment in assignments:
                if window is not None and assignment.work_date in window:
                    self.store.add(assignment)
                else:
                    discarded += 1
            if discarded and generation != self._generation:
                logger.warning("Window moved during submission; %d result(s) not merged", discarded)

    def _roster(self, pivot: PivotType) -> Sequence[Entity]:
        return self.staff if pivot is PivotType.STAFF else self.shifts

    def _require_active(self, pivot: PivotType, ids: Iterable[str]) -> None:
        active = {entity.id for entity in sort_roster(self._roster(pivot))}
        missing = [entity_id for entity_id in ids if entity_id not in active]
        if missing:
            raise InvalidSelection(f"Not an active {pivot.value}: {', '.join(missing)}")

    def _require_window(self) -> WeekWindow:
        if self.window is None:
            raise RuntimeError("Roster board has not been loaded; call load() first")
        return self.window


def _lock_keys(assignment: Assignment) -> List[Tuple[str, str, date]]:
    return [
        (PivotType.STAFF.value, assignment.staff_id, assignment.work_date),
        (PivotType.SHIFT.value, assignment.shift_id, assignment.work_date),
    ]


__all__ = ["BoardState", "Composition", "RosterBoard"]
