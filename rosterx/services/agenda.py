"""Read-only agenda views: one staff member over a range, everyone on one day."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

from ..domain.models import Assignment, Shift, Staff
from .gateway import ScheduleGateway


@dataclass(slots=True)
class AgendaEntry:
    assignment_id: str
    work_date: date
    staff_id: str
    staff_name: str
    shift_id: str
    shift_name: str
    start_time: Optional[str]
    end_time: Optional[str]
    duration_minutes: Optional[int]
    crosses_midnight: bool
    note: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.assignment_id,
            "workDate": self.work_date.isoformat(),
            "staffId": self.staff_id,
            "staffName": self.staff_name,
            "shiftId": self.shift_id,
            "shiftName": self.shift_name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "durationMinutes": self.duration_minutes,
            "crossesMidnight": self.crosses_midnight,
            "note": self.note,
        }


def staff_agenda(gateway: ScheduleGateway, staff_id: str, start: date, end: date) -> List[AgendaEntry]:
    """Assignments of one staff member between *start* and *end*, inclusive."""
    if end < start:
        raise ValueError("end date must not be before start date")
    assignments = [a for a in gateway.fetch_assignments(start, end) if a.staff_id == staff_id]
    return _entries(gateway, assignments)


def day_roster(gateway: ScheduleGateway, day: date) -> List[AgendaEntry]:
    """Everyone working on *day*, ordered by shift start time then staff name."""
    entries = _entries(gateway, gateway.fetch_assignments(day, day))
    return sorted(entries, key=lambda e: (e.start_time or "", e.staff_name.casefold()))


def _entries(gateway: ScheduleGateway, assignments: List[Assignment]) -> List[AgendaEntry]:
    shifts: Dict[str, Shift] = {s.id: s for s in gateway.fetch_shifts()}
    staff: Dict[str, Staff] = {s.id: s for s in gateway.fetch_staff()}
    result: List[AgendaEntry] = []
    for a in sorted(assignments, key=lambda a: a.work_date):
        shift = shifts.get(a.shift_id)
        person = staff.get(a.staff_id)
        result.append(
            AgendaEntry(
                assignment_id=a.id,
                work_date=a.work_date,
                staff_id=a.staff_id,
                staff_name=person.label if person else a.staff_id,
                shift_id=a.shift_id,
                shift_name=shift.name if shift else a.shift_id,
                start_time=shift.start_time.strftime("%H:%M") if shift else None,
                end_time=shift.end_time.strftime("%H:%M") if shift else None,
                duration_minutes=int(shift.duration.total_seconds() // 60) if shift else None,
                crosses_midnight=shift.crosses_midnight if shift else False,
                note=a.note,
            )
        )
    return result


__all__ = ["AgendaEntry", "day_roster", "staff_agenda"]
