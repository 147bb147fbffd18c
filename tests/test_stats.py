from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from grove.errors import InvalidTimeSpecError
from grove.stats import (
    Bucket,
    GraphMetric,
    GraphUnit,
    StatsFilter,
    TimeWindow,
    apply_filters,
    bucket_records,
    layout_grid,
    render_graph,
    render_grid,
    render_listing,
    window_bounds,
)
from grove.storage import Outcome, SessionRecord
from grove.templates import default_template
from grove.timespec import parse_grid_spec

UTC = timezone.utc
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


def record(
    start: datetime,
    *,
    label: str = "focus",
    duration: int = 20,
    outcome: Outcome = Outcome.COMPLETED,
) -> SessionRecord:
    return SessionRecord(
        tree_name="default",
        label=label,
        start_time=start,
        duration=duration,
        outcome=outcome,
        art=default_template().final_stage,
    )


def local(year: int, month: int, day: int, hour: int = 12) -> datetime:
    return datetime(year, month, day, hour).astimezone()


def test_window_bounds_week_starts_monday() -> None:
    start, end = window_bounds(TimeWindow.THIS_WEEK, NOW)

    assert start == datetime(2026, 10, 12, tzinfo=UTC)
    assert end == datetime(2026, 10, 19, tzinfo=UTC)


def test_window_bounds_month_wraps_year() -> None:
    start, end = window_bounds(TimeWindow.THIS_MONTH, datetime(2026, 12, 5, tzinfo=UTC))

    assert start == datetime(2026, 12, 1, tzinfo=UTC)
    assert end == datetime(2027, 1, 1, tzinfo=UTC)


def test_month_window_spans_daylight_saving_change() -> None:
    berlin = ZoneInfo("Europe/Berlin")
    now = datetime(2026, 10, 28, 12, 0, tzinfo=berlin)
    first_hour = record(datetime(2026, 10, 1, 0, 30, tzinfo=berlin), label="early")
    last_month = record(datetime(2026, 9, 30, 23, 30, tzinfo=berlin), label="september")

    start, end = window_bounds(TimeWindow.THIS_MONTH, now)
    selected = apply_filters(
        [last_month, first_hour], StatsFilter(window=TimeWindow.THIS_MONTH), now=now
    )

    assert start.utcoffset() == timedelta(hours=2)
    assert end.utcoffset() == timedelta(hours=1)
    assert [r.label for r in selected] == ["early"]


def test_naive_now_uses_local_midnights() -> None:
    start, end = window_bounds(TimeWindow.THIS_MONTH, datetime(2026, 10, 28, 12, 0))

    assert start == datetime(2026, 10, 1).astimezone()
    assert end == datetime(2026, 11, 1).astimezone()


def test_today_and_yesterday_windows() -> None:
    records = [
        record(datetime(2026, 10, 17, 23, 0, tzinfo=UTC), label="late"),
        record(datetime(2026, 10, 18, 8, 0, tzinfo=UTC), label="morning"),
        record(datetime(2026, 10, 19, 0, 0, tzinfo=UTC), label="tomorrow"),
    ]

    today = apply_filters(records, StatsFilter(window=TimeWindow.TODAY), now=NOW)
    yesterday = apply_filters(records, StatsFilter(window=TimeWindow.YESTERDAY), now=NOW)

    assert [r.label for r in today] == ["morning"]
    assert [r.label for r in yesterday] == ["late"]


def test_filters_combine_and_count_keeps_latest() -> None:
    records = [
        record(NOW - timedelta(hours=5), label="work"),
        record(NOW - timedelta(hours=4), label="play"),
        record(NOW - timedelta(hours=3), label="work", outcome=Outcome.ABORTED),
        record(NOW - timedelta(hours=2), label="work", duration=30),
        record(NOW - timedelta(hours=1), label="work", duration=45),
    ]

    selected = apply_filters(records, StatsFilter(label="work", count=2), now=NOW)
    assert [r.duration for r in selected] == [30, 45]

    with_aborted = apply_filters(
        records, StatsFilter(label="work", include_aborted=True), now=NOW
    )
    assert len(with_aborted) == 4

    assert apply_filters(records, StatsFilter(count=0), now=NOW) == []
    assert len(apply_filters(records, StatsFilter(count=100), now=NOW)) == 4


def test_time_window_parse() -> None:
    assert TimeWindow.parse("This-Week") is TimeWindow.THIS_WEEK
    with pytest.raises(InvalidTimeSpecError):
        TimeWindow.parse("last-week")


def test_whole_grid_truncates_to_area() -> None:
    records = [record(NOW - timedelta(minutes=i)) for i in range(10)]

    grid = layout_grid(records, parse_grid_spec("whole"), area=(23, 12), tree_size=(5, 5))

    assert (grid.rows, grid.columns) == (2, 4)
    assert grid.shown == 8
    assert grid.truncated == 2
    assert grid.slots[0][0] is records[0]


def test_grid_pads_with_blanks() -> None:
    records = [record(NOW), record(NOW, outcome=Outcome.ABORTED)]

    grid = layout_grid(records, parse_grid_spec("2x2"))

    assert grid.slots == ((records[0], records[1]), (None, None))
    assert grid.truncated == 0

    lines = render_grid(grid)
    assert len(lines) == 5 + 1 + 5
    assert all(len(line.plain) == 11 for line in lines)
    assert lines[5].plain == "-----+-----"
    assert lines[0].plain[5] == "|"


def test_grid_render_reports_truncation() -> None:
    grid = layout_grid([record(NOW)] * 3, parse_grid_spec("1x2"))

    lines = render_grid(grid)

    assert "1 more tree" in lines[-1].plain


def test_daily_buckets_are_contiguous() -> None:
    records = [
        record(local(2026, 10, 5), duration=20),
        record(local(2026, 10, 5, 18), duration=25),
        record(local(2026, 10, 8), duration=30),
    ]

    buckets = bucket_records(records, GraphUnit.DAILY)

    assert buckets == [
        Bucket("05-10", 45),
        Bucket("06-10", 0),
        Bucket("07-10", 0),
        Bucket("08-10", 30),
    ]


def test_weekly_and_monthly_buckets() -> None:
    records = [
        record(local(2026, 10, 5)),
        record(local(2026, 10, 11)),
        record(local(2026, 10, 20)),
    ]
    weekly = bucket_records(records, GraphUnit.WEEKLY, metric=GraphMetric.COUNT)
    assert weekly == [Bucket("05-10", 2), Bucket("12-10", 0), Bucket("19-10", 1)]

    monthly = bucket_records(
        [record(local(2026, 11, 3)), record(local(2027, 2, 9))],
        GraphUnit.MONTHLY,
        metric=GraphMetric.COUNT,
    )
    assert [bucket.label for bucket in monthly] == ["11-2026", "12-2026", "01-2027", "02-2027"]
    assert [bucket.value for bucket in monthly] == [1, 0, 0, 1]


def test_bucket_labels_use_given_format() -> None:
    buckets = bucket_records([record(local(2026, 3, 1))], GraphUnit.YEARLY, date_format="year %Y")

    assert buckets == [Bucket("year 2026", 20)]
    assert bucket_records([], GraphUnit.DAILY) == []


def test_graph_unit_parse() -> None:
    assert GraphUnit.parse("Monthly") is GraphUnit.MONTHLY
    with pytest.raises(InvalidTimeSpecError):
        GraphUnit.parse("hourly")


def test_render_graph_scales_to_width() -> None:
    lines = render_graph([Bucket("05-10", 60), Bucket("06-10", 0), Bucket("07-10", 30)], width=40)

    plain = [line.plain for line in lines]
    assert all(len(line) <= 40 for line in plain)
    assert plain[0].endswith(" 01:00")
    assert plain[1].startswith("06-10| ")
    full = plain[0].count(" ", len("05-10|")) - 1
    half = plain[2].count(" ", len("07-10|")) - 1
    assert half == full // 2


def test_listing_marks_dead_trees() -> None:
    lines = render_listing(
        [record(NOW, label="work"), record(NOW, label="work", outcome=Outcome.ABORTED)],
        "%d-%m-%Y %H:%M",
    )

    assert lines[0].plain == "work | 18-10-2026 12:00 | 00:20"
    assert lines[1].plain.endswith("| died")
