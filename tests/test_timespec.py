from __future__ import annotations

import pytest

from grove.errors import InvalidDurationError, InvalidTimeSpecError
from grove.timespec import (
    GridSpec,
    format_clock,
    format_duration,
    parse_duration,
    parse_grid_spec,
)


@pytest.mark.parametrize(
    ("raw", "minutes"),
    [("00:20", 20), ("1:05", 65), ("01:20", 80), ("45", 45), (" 02:00 ", 120)],
)
def test_parse_duration_accepts_clock_and_minutes(raw: str, minutes: int) -> None:
    assert parse_duration(raw) == minutes


@pytest.mark.parametrize("raw", ["", "00:00", "0", "1:75", "abc", "1h", "-5"])
def test_parse_duration_rejects_bad_input(raw: str) -> None:
    with pytest.raises(InvalidDurationError):
        parse_duration(raw)


def test_format_duration_pads_hours_and_minutes() -> None:
    assert format_duration(5) == "00:05"
    assert format_duration(125) == "02:05"


def test_format_clock_never_negative() -> None:
    assert format_clock(3725.9) == "01:02:05"
    assert format_clock(-3) == "00:00:00"


def test_parse_grid_spec() -> None:
    assert parse_grid_spec("3x4") == GridSpec(rows=3, columns=4)
    whole = parse_grid_spec("WHOLE")
    assert whole.whole
    assert whole.rows is None


@pytest.mark.parametrize("raw", ["3", "0x2", "x3", "3x", "3*4", "all"])
def test_parse_grid_spec_rejects_bad_input(raw: str) -> None:
    with pytest.raises(InvalidTimeSpecError):
        parse_grid_spec(raw)
