"""Parsing helpers for user supplied durations and grid sizes."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import InvalidDurationError, InvalidTimeSpecError

_DURATION = re.compile(r"^(\d+):(\d{1,2})$")
_GRID = re.compile(r"^(\d+)x(\d+)$")


def parse_duration(value: str) -> int:
    """
    Parse a growth duration into minutes.
    Accepts:
      - "HH:MM" / "H:MM" -> hours and minutes ("01:20" -> 80)
      - "45"             -> plain minutes
    The result must be positive.
    """
    s = value.strip()
    if s.isdigit():
        minutes = int(s)
    else:
        m = _DURATION.match(s)
        if not m:
            raise InvalidDurationError(f"Could not parse duration {value!r}; use HH:MM like 01:20")
        hours, mins = int(m.group(1)), int(m.group(2))
        if mins >= 60:
            raise InvalidDurationError(f"Minutes must be below 60 in {value!r}")
        minutes = hours * 60 + mins
    if minutes <= 0:
        raise InvalidDurationError("Duration must be at least one minute")
    return minutes


def format_duration(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_clock(seconds: float) -> str:
    """Format a non-negative number of seconds as HH:MM:SS."""

    total = max(0, int(seconds))
    return f"{total // 3600:02d}:{total // 60 % 60:02d}:{total % 60:02d}"


@dataclass(frozen=True, slots=True)
class GridSpec:
    """Requested grid size; ``rows``/``columns`` are ``None`` for ``whole``."""

    rows: int | None = None
    columns: int | None = None

    @property
    def whole(self) -> bool:
        return self.rows is None


def parse_grid_spec(value: str) -> GridSpec:
    s = value.strip().lower()
    if s == "whole":
        return GridSpec()
    m = _GRID.match(s)
    if not m:
        raise InvalidTimeSpecError(f"Invalid grid size {value!r}; use RxC like 3x4 or 'whole'")
    rows, columns = int(m.group(1)), int(m.group(2))
    if rows < 1 or columns < 1:
        raise InvalidTimeSpecError("Grid rows and columns must be at least 1")
    return GridSpec(rows=rows, columns=columns)


__all__ = [
    "GridSpec",
    "format_clock",
    "format_duration",
    "parse_duration",
    "parse_grid_spec",
]
