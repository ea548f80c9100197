"""In-memory projection of the assignments loaded for one week window."""
from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .models import Assignment, PivotType
from .week import WeekWindow

TripleKey = Tuple[str, str, date]


class AssignmentStore(Mapping[date, List[Assignment]]):
    """Assignments grouped by work date, unique on ``(staff, shift, date)``.

    Insertion order is kept inside each day so that grid cells list newly
    created counterparts after the existing ones.
    """

    def __init__(
        self,
        assignments: Iterable[Assignment] | None = None,
        *,
        window: Optional[WeekWindow] = None,
    ) -> None:
        self._data: Dict[date, List[Assignment]] = defaultdict(list)
        self._by_key: Dict[TripleKey, Assignment] = {}
        self._by_id: Dict[str, Assignment] = {}
        self.window = window
        if assignments:
            for a in assignments:
                self.add(a)

    # -- Mapping protocol ---------------------------------------------------------
    def __getitem__(self, key: date) -> List[Assignment]:
        return list(self._data.get(key, ()))

    def __iter__(self) -> Iterator[date]:
        return iter(sorted(self._data.keys()))

    def __len__(self) -> int:
        """Number of dates holding assignments; use :attr:`size` for the assignment count."""
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    # -- Core helpers -------------------------------------------------------------
    @property
    def size(self) -> int:
        return len(self._by_id)

    def add(self, assignment: Assignment) -> bool:
        """Insert *assignment*; returns ``False`` if its triple is already present."""
        if assignment.key in self._by_key:
            return False
        self._data[assignment.work_date].append(assignment)
        self._by_key[assignment.key] = assignment
        self._by_id[assignment.id] = assignment
        return True

    def remove(self, assignment_id: str) -> Optional[Assignment]:
        record = self._by_id.pop(assignment_id, None)
        if record is None:
            return None
        del self._by_key[record.key]
        rows = [a for a in self._data[record.work_date] if a.id != assignment_id]
        if rows:
            self._data[record.work_date] = rows
        else:
            self._data.pop(record.work_date, None)
        return record

    def find(self, assignment_id: str) -> Optional[Assignment]:
        return self._by_id.get(assignment_id)

    def contains(self, staff_id: str, shift_id: str, work_date: date) -> bool:
        return (staff_id, shift_id, work_date) in self._by_key

    def for_row(self, pivot: PivotType, row_id: str, day: date) -> List[Assignment]:
        return [a for a in self._data.get(day, ()) if pivot.row_id_of(a) == row_id]

    def iter_assignments(self) -> Iterator[Assignment]:
        for day in self:
            yield from self._data[day]

    def replace_all(self, assignments: Iterable[Assignment], *, window: Optional[WeekWindow] = None) -> None:
        self._data.clear()
        self._by_key.clear()
        self._by_id.clear()
        self.window = window
        for a in assignments:
            self.add(a)


__all__ = ["AssignmentStore", "TripleKey"]
