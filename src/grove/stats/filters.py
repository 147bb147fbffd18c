"""Record filters for statistics views."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Iterable

from ..errors import InvalidTimeSpecError
from ..storage.models import SessionRecord


class TimeWindow(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this-week"
    THIS_MONTH = "this-month"
    THIS_YEAR = "this-year"

    @classmethod
    def parse(cls, value: str) -> "TimeWindow":
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            choices = ", ".join(window.value for window in cls)
            raise InvalidTimeSpecError(
                f"Unknown time period {value!r}; choose one of {choices}"
            ) from exc


def _first_of_month(d: date) -> date:
    return date(d.year, d.month, 1)


def add_months(d: date, n: int) -> date:
    y = d.year + (d.month - 1 + n) // 12
    m = (d.month - 1 + n) % 12 + 1
    return date(y, m, 1)


def _midnight(day: date, tz: tzinfo | None) -> datetime:
    if tz is None:
        return datetime.combine(day, time()).astimezone()
    return datetime.combine(day, time(), tzinfo=tz)


def window_bounds(window: TimeWindow, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the half-open ``[start, end)`` interval of ``window`` around ``now``.

    Weeks start on Monday; months and years follow calendar boundaries.
    Each bound is a midnight with its own UTC offset. A naive or missing
    ``now`` means local time; an aware ``now`` keeps its zone.
    """

    now = now or datetime.now()
    today = now.date()
    if window is TimeWindow.TODAY:
        first, last = today, today + timedelta(days=1)
    elif window is TimeWindow.YESTERDAY:
        first, last = today - timedelta(days=1), today
    elif window is TimeWindow.THIS_WEEK:
        first = today - timedelta(days=today.weekday())
        last = first + timedelta(days=7)
    elif window is TimeWindow.THIS_MONTH:
        first = _first_of_month(today)
        last = add_months(first, 1)
    else:
        first, last = date(today.year, 1, 1), date(today.year + 1, 1, 1)

    return _midnight(first, now.tzinfo), _midnight(last, now.tzinfo)


@dataclass(frozen=True, slots=True)
class StatsFilter:
    """Optional filters; every one that is set must match."""

    label: str | None = None
    window: TimeWindow | None = None
    count: int | None = None
    include_aborted: bool = False


def apply_filters(
    records: Iterable[SessionRecord],
    filters: StatsFilter,
    *,
    now: datetime | None = None,
) -> list[SessionRecord]:
    """Filter history records, keeping their chronological order.

    ``count`` is applied last and keeps the most recent records.
    """

    selected = [record for record in records if filters.include_aborted or record.completed]

    if filters.label is not None:
        selected = [record for record in selected if record.label == filters.label]

    if filters.window is not None:
        start, end = window_bounds(filters.window, now)
        selected = [record for record in selected if start <= record.start_time < end]

    if filters.count is not None:
        if filters.count < 0:
            raise ValueError("count must be >= 0")
        selected = selected[len(selected) - min(filters.count, len(selected)) :]

    return selected


__all__ = ["StatsFilter", "TimeWindow", "apply_filters", "window_bounds"]
