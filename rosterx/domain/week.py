"""Seven-day display windows and week paging."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, Optional, Tuple

DAYS_IN_WEEK = 7
MONDAY = 1


@dataclass(frozen=True)
class WeekWindow:
    days: Tuple[date, ...]

    def __post_init__(self) -> None:
        if len(self.days) != DAYS_IN_WEEK:
            raise ValueError("A week window holds exactly seven days")

    def __iter__(self) -> Iterator[date]:
        return iter(self.days)

    def __len__(self) -> int:
        return DAYS_IN_WEEK

    def __getitem__(self, index: int) -> date:
        return self.days[index]

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end

    @property
    def start(self) -> date:
        return self.days[0]

    @property
    def end(self) -> date:
        return self.days[-1]

    @property
    def week_start(self) -> int:
        return self.start.isoweekday()

    def iso_range(self) -> Tuple[str, str]:
        return self.start.isoformat(), self.end.isoformat()


def window_for(anchor: date, week_start: int = MONDAY) -> WeekWindow:
    """Return the week containing *anchor*, starting on ISO weekday *week_start*."""

    if not 1 <= week_start <= DAYS_IN_WEEK:
        raise ValueError("week_start must be an ISO weekday between 1 and 7")
    offset = (anchor.isoweekday() - week_start) % DAYS_IN_WEEK
    first = anchor - timedelta(days=offset)
    return WeekWindow(tuple(first + timedelta(days=i) for i in range(DAYS_IN_WEEK)))


def shift_window(window: WeekWindow, weeks: int) -> WeekWindow:
    return window_for(window.start + timedelta(days=DAYS_IN_WEEK * weeks), window.week_start)


def this_week(today: Optional[date] = None, week_start: int = MONDAY) -> WeekWindow:
    return window_for(today or date.today(), week_start)


__all__ = ["WeekWindow", "window_for", "shift_window", "this_week", "DAYS_IN_WEEK", "MONDAY"]
