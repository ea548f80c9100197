"""Expansion of weekly recurrences into concrete work dates."""
from __future__ import annotations

from datetime import date, timedelta
from typing import AbstractSet, Iterator, List, Optional

from ..domain.models import Recurrence
from ..errors import InvalidRecurrence

WEEKDAY_NAMES = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
    7: "Sunday",
}


def iter_days(start: date, until: date) -> Iterator[date]:
    day = start
    while day <= until:
        yield day
        day += timedelta(days=1)


def expand(start: date, weekdays: AbstractSet[int], until: date) -> List[date]:
    """Every date in ``[start, until]`` whose ISO weekday is in *weekdays*.

    Both bounds are inclusive. An inverted range or an empty weekday set
    yields an empty list; callers decide whether that is an error.
    """

    if not weekdays or until < start:
        return []
    return [day for day in iter_days(start, until) if day.isoweekday() in weekdays]


def validate(start: date, recurrence: Recurrence) -> None:
    if not recurrence.weekdays:
        raise InvalidRecurrence("Select at least one day to repeat on")
    unknown = sorted(d for d in recurrence.weekdays if d not in WEEKDAY_NAMES)
    if unknown:
        raise InvalidRecurrence(f"Unknown weekday number(s): {unknown}; use 1 (Monday) to 7 (Sunday)")
    if recurrence.until < start:
        raise InvalidRecurrence(
            f"Repeat-until date {recurrence.until.isoformat()} is before the work date {start.isoformat()}"
        )


def resolve_dates(start: date, recurrence: Optional[Recurrence]) -> List[date]:
    """Concrete dates a batch must be created for."""

    if recurrence is None:
        return [start]
    validate(start, recurrence)
    dates = expand(start, recurrence.weekdays, recurrence.until)
    if not dates:
        names = ", ".join(WEEKDAY_NAMES[d] for d in sorted(recurrence.weekdays))
        raise InvalidRecurrence(
            f"No {names} falls between {start.isoformat()} and {recurrence.until.isoformat()}"
        )
    return dates


__all__ = ["WEEKDAY_NAMES", "expand", "iter_days", "resolve_dates", "validate"]
