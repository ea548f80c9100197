"""Pivoted week grids built from the flat assignment relation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Collection, Dict, Iterable, List, Optional, Sequence, Union

from ..domain.models import Assignment, PivotType, Shift, Staff
from ..domain.store import AssignmentStore
from ..domain.week import WeekWindow
from ..rules.conflicts import is_row_date_saturated

Entity = Union[Staff, Shift]


@dataclass(slots=True)
class CellEntry:
    assignment: Assignment
    counterpart_id: str
    label: str


@dataclass(slots=True)
class GridCell:
    date: date
    entries: List[CellEntry]
    can_add_more: bool
    available_counterpart_ids: List[str]


@dataclass(slots=True)
class GridRow:
    id: str
    label: str
    detail: Optional[str]
    cells: List[GridCell]


@dataclass(slots=True)
class Grid:
    pivot: PivotType
    days: List[date]
    rows: List[GridRow] = field(default_factory=list)

    def row(self, row_id: str) -> Optional[GridRow]:
        for row in self.rows:
            if row.id == row_id:
                return row
        return None

    def cell(self, row_id: str, day: date) -> Optional[GridCell]:
        row = self.row(row_id)
        if row is None:
            return None
        for cell in row.cells:
            if cell.date == day:
                return cell
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "view": self.pivot.value,
            "days": [day.isoformat() for day in self.days],
            "rows": [
                {
                    "id": row.id,
                    "label": row.label,
                    "detail": row.detail,
                    "cells": [
                        {
                            "date": cell.date.isoformat(),
                            "canAddMore": cell.can_add_more,
                            "available": cell.available_counterpart_ids,
                            "assignments": [
                                {
                                    "id": entry.assignment.id,
                                    "staffId": entry.assignment.staff_id,
                                    "shiftId": entry.assignment.shift_id,
                                    "counterpartId": entry.counterpart_id,
                                    "label": entry.label,
                                    "note": entry.assignment.note,
                                    "status": entry.assignment.status,
                                }
                                for entry in cell.entries
                            ],
                        }
                        for cell in row.cells
                    ],
                }
                for row in self.rows
            ],
        }


def sort_roster(entities: Iterable[Entity]) -> List[Entity]:
    """Active entities in display order: by label, case-insensitive, then id."""
    active = [entity for entity in entities if entity.is_active]
    return sorted(active, key=lambda entity: (_name_of(entity).casefold(), entity.id))


def build_grid(
    pivot: PivotType,
    staff: Sequence[Staff],
    shifts: Sequence[Shift],
    window: WeekWindow,
    assignments: Iterable[Assignment],
    *,
    staff_filter: Optional[Collection[str]] = None,
) -> Grid:
    rows_source: Sequence[Entity] = staff if pivot is PivotType.STAFF else shifts
    counterpart_source: Sequence[Entity] = shifts if pivot is PivotType.STAFF else staff

    store = assignments if isinstance(assignments, AssignmentStore) else AssignmentStore(assignments)
    labels = {entity.id: entity.label for entity in counterpart_source}
    active_counterparts = [entity.id for entity in sort_roster(counterpart_source)]

    rows = sort_roster(rows_source)
    if staff_filter and pivot is PivotType.STAFF:
        wanted = set(staff_filter)
        rows = [row for row in rows if row.id in wanted]

    grid = Grid(pivot=pivot, days=list(window))
    for entity in rows:
        cells = [
            _prepare_cell(store, pivot, entity.id, day, labels, active_counterparts)
            for day in window
        ]
        grid.rows.append(
            GridRow(id=entity.id, label=_name_of(entity), detail=_detail_of(entity), cells=cells)
        )
    return grid


def _prepare_cell(
    store: AssignmentStore,
    pivot: PivotType,
    row_id: str,
    day: date,
    labels: Dict[str, str],
    active_counterparts: List[str],
) -> GridCell:
    entries: List[CellEntry] = []
    for assignment in store.for_row(pivot, row_id, day):
        counterpart_id = pivot.counterpart_id_of(assignment)
        entries.append(
            CellEntry(
                assignment=assignment,
                counterpart_id=counterpart_id,
                label=labels.get(counterpart_id, counterpart_id),
            )
        )
    taken = {entry.counterpart_id for entry in entries}
    return GridCell(
        date=day,
        entries=entries,
        can_add_more=not is_row_date_saturated(store, pivot, row_id, day, active_counterparts),
        available_counterpart_ids=[cid for cid in active_counterparts if cid not in taken],
    )


def _name_of(entity: Entity) -> str:
    return entity.display_name if isinstance(entity, Staff) else entity.name


def _detail_of(entity: Entity) -> Optional[str]:
    if isinstance(entity, Staff):
        return entity.login_name
    return f"{entity.start_time.strftime('%H:%M')} - {entity.end_time.strftime('%H:%M')}"


__all__ = ["CellEntry", "Grid", "GridCell", "GridRow", "build_grid", "sort_roster"]
