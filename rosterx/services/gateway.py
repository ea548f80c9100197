"""Persistence collaborator contract and the bundled SQLite implementation."""
from __future__ import annotations

from datetime import date, time
from typing import Any, List, Mapping, Optional, Protocol, Sequence

from ..dao import schedule_dao, shifts_dao, staff_dao
from ..domain.models import ActivityStatus, Assignment, PivotType, Shift, Staff


class ScheduleGateway(Protocol):
    """Everything the roster core needs from persistence."""

    def fetch_assignments(self, start: date, end: date) -> List[Assignment]:
        ...

    def fetch_shifts(self) -> List[Shift]:
        ...

    def fetch_staff(self) -> List[Staff]:
        ...

    def create_assignments(
        self,
        pivot: PivotType,
        row_id: str,
        counterpart_ids: Sequence[str],
        dates: Sequence[date],
        note: Optional[str],
    ) -> List[Assignment]:
        ...

    def delete_assignment(self, assignment_id: str) -> bool:
        ...


def parse_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value).strip())


def parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def staff_from_row(row: Mapping[str, Any]) -> Staff:
    return Staff(
        id=str(row["id"]),
        display_name=row["full_name"],
        login_name=row.get("user_name"),
        status=ActivityStatus.parse(row.get("status")),
    )


def shift_from_row(row: Mapping[str, Any]) -> Shift:
    return Shift(
        id=str(row["id"]),
        name=row["shift_name"],
        start_time=parse_time(row["start_time"]),
        end_time=parse_time(row["end_time"]),
        status=ActivityStatus.parse(row.get("status")),
    )


def assignment_from_row(row: Mapping[str, Any]) -> Assignment:
    return Assignment(
        id=str(row["id"]),
        staff_id=str(row["staff_id"]),
        shift_id=str(row["shift_id"]),
        work_date=parse_date(row["work_date"]),
        note=row.get("note"),
        status=row.get("status") or "ACTIVE",
    )


class DatabaseGateway:
    """Gateway over the application's SQLite database.

    Must be used inside a Flask application context.
    """

    def fetch_assignments(self, start: date, end: date) -> List[Assignment]:
        return [assignment_from_row(row) for row in schedule_dao.list_between(start.isoformat(), end.isoformat())]

    def fetch_shifts(self) -> List[Shift]:
        return [shift_from_row(row) for row in shifts_dao.list_shifts(include_inactive=True)]

    def fetch_staff(self) -> List[Staff]:
        return [staff_from_row(row) for row in staff_dao.list_staff(include_inactive=True)]

    def create_assignments(
        self,
        pivot: PivotType,
        row_id: str,
        counterpart_ids: Sequence[str],
        dates: Sequence[date],
        note: Optional[str],
    ) -> List[Assignment]:
        rows = []
        for counterpart_id in counterpart_ids:
            staff_id, shift_id = pivot.triple_ids(row_id, counterpart_id)
            for day in dates:
                rows.append((staff_id, shift_id, day.isoformat(), note))
        return [assignment_from_row(row) for row in schedule_dao.insert_many(rows)]

    def delete_assignment(self, assignment_id: str) -> bool:
        return schedule_dao.delete_schedule(assignment_id) > 0


__all__ = [
    "DatabaseGateway",
    "ScheduleGateway",
    "assignment_from_row",
    "parse_date",
    "parse_time",
    "shift_from_row",
    "staff_from_row",
]
