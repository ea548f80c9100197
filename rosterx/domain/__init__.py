"""Domain objects for the roster scheduler."""

from .models import (
    ActivityStatus,
    Assignment,
    BatchOutcome,
    BatchRequest,
    PivotType,
    Recurrence,
    Shift,
    SkippedPair,
    Staff,
)
from .store import AssignmentStore
from .week import WeekWindow, shift_window, this_week, window_for

__all__ = [
    "ActivityStatus",
    "Assignment",
    "AssignmentStore",
    "BatchOutcome",
    "BatchRequest",
    "PivotType",
    "Recurrence",
    "Shift",
    "SkippedPair",
    "Staff",
    "WeekWindow",
    "shift_window",
    "this_week",
    "window_for",
]
