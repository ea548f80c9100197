"""Weekly staff roster scheduler.

Modules:
- domain: staff, shifts, assignments, week windows and the assignment store
- rules: recurrence expansion and conflict checks
- services: grid pivot, roster board (orchestration), agenda views, gateways
- dao / adapters: SQLite persistence, remote REST gateway, XLSX export
"""

from .domain import (
    Assignment,
    AssignmentStore,
    BatchOutcome,
    BatchRequest,
    PivotType,
    Recurrence,
    Shift,
    Staff,
    WeekWindow,
    shift_window,
    window_for,
)
from .services.grid import build_grid
from .services.orchestrator import RosterBoard

__all__ = [
    "Assignment",
    "AssignmentStore",
    "BatchOutcome",
    "BatchRequest",
    "PivotType",
    "Recurrence",
    "RosterBoard",
    "Shift",
    "Staff",
    "WeekWindow",
    "build_grid",
    "shift_window",
    "window_for",
]
