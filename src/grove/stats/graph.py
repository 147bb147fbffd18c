"""Time-bucketed aggregates of grown trees."""

from __future__ import annotations

from datetime import date, timedelta
from enum import Enum
from typing import Iterable, NamedTuple

from ..errors import InvalidTimeSpecError
from ..storage.models import SessionRecord
from .filters import add_months


class GraphUnit(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: str) -> "GraphUnit":
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            choices = ", ".join(unit.value for unit in cls)
            raise InvalidTimeSpecError(
                f"Unknown time frame {value!r}; choose one of {choices}"
            ) from exc


class GraphMetric(str, Enum):
    DURATION = "duration"
    COUNT = "count"


DEFAULT_LABEL_FORMATS = {
    GraphUnit.DAILY: "%d-%m",
    GraphUnit.WEEKLY: "%d-%m",
    GraphUnit.MONTHLY: "%m-%Y",
    GraphUnit.YEARLY: "%Y",
}


class Bucket(NamedTuple):
    label: str
    value: int


def bucket_start(day: date, unit: GraphUnit) -> date:
    if unit is GraphUnit.DAILY:
        return day
    if unit is GraphUnit.WEEKLY:
        return day - timedelta(days=day.weekday())
    if unit is GraphUnit.MONTHLY:
        return date(day.year, day.month, 1)
    return date(day.year, 1, 1)


def next_bucket(start: date, unit: GraphUnit) -> date:
    if unit is GraphUnit.DAILY:
        return start + timedelta(days=1)
    if unit is GraphUnit.WEEKLY:
        return start + timedelta(days=7)
    if unit is GraphUnit.MONTHLY:
        return add_months(start, 1)
    return date(start.year + 1, 1, 1)


def _value(record: SessionRecord, metric: GraphMetric) -> int:
    return record.duration if metric is GraphMetric.DURATION else 1


def bucket_records(
    records: Iterable[SessionRecord],
    unit: GraphUnit,
    *,
    metric: GraphMetric = GraphMetric.DURATION,
    date_format: str | None = None,
) -> list[Bucket]:
    """Aggregate records into contiguous buckets, earliest first.

    Buckets run from the earliest to the latest record's bucket; empty
    buckets are kept with value 0. Values are total minutes or session
    counts depending on ``metric``. ``date_format`` is handed to
    ``strftime`` untouched.
    """

    totals: dict[date, int] = {}
    for record in records:
        key = bucket_start(record.start_time.astimezone().date(), unit)
        totals[key] = totals.get(key, 0) + _value(record, metric)
    if not totals:
        return []

    pattern = date_format or DEFAULT_LABEL_FORMATS[unit]
    buckets: list[Bucket] = []
    current, last = min(totals), max(totals)
    while current <= last:
        buckets.append(Bucket(current.strftime(pattern), totals.get(current, 0)))
        current = next_bucket(current, unit)
    return buckets


__all__ = [
    "Bucket",
    "DEFAULT_LABEL_FORMATS",
    "GraphMetric",
    "GraphUnit",
    "bucket_records",
    "bucket_start",
    "next_bucket",
]
