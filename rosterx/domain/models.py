"""Domain dataclasses for roster scheduling."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class ActivityStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ActivityStatus":
        """Accept any casing; a missing status means the record is active."""
        if value is None or not str(value).strip():
            return cls.ACTIVE
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        raise ValueError(f"Unknown activity status: {value!r}")


class PivotType(str, Enum):
    """Which entity plays the row role in a grid or batch request."""

    STAFF = "staff"
    SHIFT = "shift"

    @property
    def counterpart(self) -> "PivotType":
        return PivotType.SHIFT if self is PivotType.STAFF else PivotType.STAFF

    def triple_ids(self, row_id: str, counterpart_id: str) -> Tuple[str, str]:
        """Return ``(staff_id, shift_id)`` for a row/counterpart pair."""
        if self is PivotType.STAFF:
            return row_id, counterpart_id
        return counterpart_id, row_id

    def row_id_of(self, assignment: "Assignment") -> str:
        return assignment.staff_id if self is PivotType.STAFF else assignment.shift_id

    def counterpart_id_of(self, assignment: "Assignment") -> str:
        return assignment.shift_id if self is PivotType.STAFF else assignment.staff_id


@dataclass(frozen=True)
class Staff:
    id: str
    display_name: str
    login_name: Optional[str] = None
    status: ActivityStatus = ActivityStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status is ActivityStatus.ACTIVE

    @property
    def label(self) -> str:
        if self.login_name:
            return f"{self.display_name} ({self.login_name})"
        return self.display_name


@dataclass(frozen=True)
class Shift:
    id: str
    name: str
    start_time: time
    end_time: time
    status: ActivityStatus = ActivityStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status is ActivityStatus.ACTIVE

    @property
    def label(self) -> str:
        return self.name

    @property
    def crosses_midnight(self) -> bool:
        return self.end_time <= self.start_time

    @property
    def duration(self) -> timedelta:
        anchor = date(2000, 1, 1)
        start = datetime.combine(anchor, self.start_time)
        end = datetime.combine(anchor, self.end_time)
        if self.crosses_midnight:
            end += timedelta(days=1)
        return end - start


@dataclass(frozen=True)
class Assignment:
    id: str
    staff_id: str
    shift_id: str
    work_date: date
    note: Optional[str] = None
    status: str = "ACTIVE"

    @property
    def key(self) -> Tuple[str, str, date]:
        return self.staff_id, self.shift_id, self.work_date


@dataclass(frozen=True)
class Recurrence:
    """Weekly repetition chosen at creation time (1 = Monday ... 7 = Sunday)."""

    weekdays: FrozenSet[int]
    until: date


@dataclass(frozen=True)
class BatchRequest:
    pivot: PivotType
    row_id: str
    counterpart_ids: Tuple[str, ...]
    work_date: date
    note: Optional[str] = None
    recurrence: Optional[Recurrence] = None

    @property
    def lock_key(self) -> Tuple[str, str, date]:
        return self.pivot.value, self.row_id, self.work_date


@dataclass(frozen=True)
class SkippedPair:
    staff_id: str
    shift_id: str
    work_date: date
    reason: str = "already assigned"


@dataclass
class BatchOutcome:
    created: list[Assignment] = field(default_factory=list)
    skipped: list[SkippedPair] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def status(self) -> str:
        if not self.created:
            return "already_assigned"
        if self.skipped:
            return "partial"
        return "created"

    @property
    def message(self) -> str:
        if self.status == "already_assigned":
            return "Nothing to create: every selection is already assigned"
        if self.status == "partial":
            return (
                f"Created {self.created_count} assignment(s); "
                f"skipped {self.skipped_count} already assigned"
            )
        return f"Created {self.created_count} assignment(s)"


__all__ = [
    "ActivityStatus",
    "PivotType",
    "Staff",
    "Shift",
    "Assignment",
    "Recurrence",
    "BatchRequest",
    "SkippedPair",
    "BatchOutcome",
]
