from __future__ import annotations

import itertools
from datetime import date, time
from typing import List, Optional, Sequence

import pytest

from rosterx.domain.models import ActivityStatus, Assignment, PivotType, Shift, Staff
from rosterx.errors import CollaboratorError


class FakeGateway:
    """In-memory ScheduleGateway with the same uniqueness rule as the database."""

    def __init__(self, staff: Sequence[Staff], shifts: Sequence[Shift]) -> None:
        self.staff = list(staff)
        self.shifts = list(shifts)
        self.rows: List[Assignment] = []
        self.create_calls: List[tuple] = []
        self.fetch_calls: List[tuple] = []
        self.fail_next_create = False
        self._ids = itertools.count(1)

    def seed(self, staff_id: str, shift_id: str, day: date, note: Optional[str] = None) -> Assignment:
        record = Assignment(id=f"a{next(self._ids)}", staff_id=staff_id, shift_id=shift_id, work_date=day, note=note)
        self.rows.append(record)
        return record

    def fetch_assignments(self, start: date, end: date) -> List[Assignment]:
        self.fetch_calls.append((start, end))
        return [a for a in self.rows if start <= a.work_date <= end]

    def fetch_shifts(self) -> List[Shift]:
        return list(self.shifts)

    def fetch_staff(self) -> List[Staff]:
        return list(self.staff)

    def create_assignments(self, pivot, row_id, counterpart_ids, dates, note):
        self.create_calls.append((pivot, row_id, tuple(counterpart_ids), tuple(dates), note))
        if self.fail_next_create:
            self.fail_next_create = False
            raise CollaboratorError("backend unavailable")
        taken = {a.key for a in self.rows}
        created = []
        for counterpart_id in counterpart_ids:
            staff_id, shift_id = pivot.triple_ids(row_id, counterpart_id)
            for day in dates:
                if (staff_id, shift_id, day) in taken:
                    continue
                created.append(self.seed(staff_id, shift_id, day, note))
        return created

    def delete_assignment(self, assignment_id: str) -> bool:
        before = len(self.rows)
        self.rows = [a for a in self.rows if a.id != assignment_id]
        return len(self.rows) < before


@pytest.fixture()
def staff() -> List[Staff]:
    return [
        Staff("alice", "Alice", "alice.n"),
        Staff("bob", "Bob", "bob.t"),
        Staff("carol", "Carol", None),
        Staff("dan", "Dan", "dan.p", ActivityStatus.INACTIVE),
    ]


@pytest.fixture()
def shifts() -> List[Shift]:
    return [
        Shift("morning", "Morning", time(7), time(15)),
        Shift("night", "Night", time(22), time(6)),
        Shift("oncall", "On-call", time(8), time(20), ActivityStatus.INACTIVE),
    ]


@pytest.fixture()
def gateway(staff, shifts) -> FakeGateway:
    return FakeGateway(staff, shifts)


@pytest.fixture()
def monday() -> date:
    return date(2024, 6, 3)


__all__ = ["FakeGateway", "PivotType"]
