"""Tree template models."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

RGB = tuple[int, int, int]

NAME_PATTERN = re.compile(r"^[-_ a-zA-Z0-9]+$")

_BLACK: RGB = (0, 0, 0)


def _validate_rgb(value: Any) -> RGB:
    channels = tuple(value)
    if len(channels) != 3 or any(not 0 <= int(channel) <= 255 for channel in channels):
        raise ValueError(f"Colour must be three channels in 0..255, got {value!r}")
    return tuple(int(channel) for channel in channels)  # type: ignore[return-value]


def _wither(color: RGB) -> RGB:
    if color == _BLACK:
        return color
    red, green, blue = color
    luminance = (red * 299 + green * 587 + blue * 114) // 1000
    return (min(255, luminance + 40), min(255, luminance + 20), luminance // 2)


class Cell(BaseModel):
    """A single coloured character of tree art."""

    model_config = ConfigDict(frozen=True)

    bg: RGB = Field(default=_BLACK, description="Background colour as an RGB triple.")
    fg: RGB = Field(default=_BLACK, description="Foreground colour as an RGB triple.")
    symbol: str = Field(default=" ", description="Exactly one printable character.")

    @field_validator("bg", "fg", mode="before")
    @classmethod
    def _check_color(cls, value: Any) -> RGB:
        return _validate_rgb(value)

    @field_validator("symbol")
    @classmethod
    def _check_symbol(cls, value: str) -> str:
        if len(value) != 1 or not value.isprintable():
            raise ValueError(f"Cell symbol must be one printable character, got {value!r}")
        return value

    def withered(self) -> "Cell":
        return Cell(bg=_wither(self.bg), fg=_wither(self.fg), symbol=self.symbol)


class Stage(BaseModel):
    """One frame of a tree's growth: a non-empty rectangle of cells."""

    model_config = ConfigDict(frozen=True)

    rows: tuple[tuple[Cell, ...], ...]

    @field_validator("rows")
    @classmethod
    def _check_rectangle(cls, value: tuple[tuple[Cell, ...], ...]):
        if not value or not value[0]:
            raise ValueError("A stage needs at least one row and one column")
        width = len(value[0])
        if any(len(row) != width for row in value):
            raise ValueError("All rows of a stage must have the same width")
        return value

    @property
    def dimensions(self) -> tuple[int, int]:
        """Return ``(height, width)`` in cells."""

        return len(self.rows), len(self.rows[0])

    def cell(self, line: int, column: int) -> Cell:
        return self.rows[line][column]

    def withered(self) -> "Stage":
        return Stage(rows=tuple(tuple(cell.withered() for cell in row) for row in self.rows))


class TreeTemplate(BaseModel):
    """A named, shareable tree definition: art stages plus session defaults."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique identifier of the tree within a collection.")
    default_duration: int = Field(
        default=20,
        description="Growth time in minutes used when a session does not override it.",
    )
    default_label: str = Field(
        default="standard",
        description="Label used when a session does not override it.",
    )
    stages: tuple[Stage, ...] = Field(
        ...,
        description="Ordered growth frames from seed (index 0) to mature tree.",
    )

    @field_validator("name", "default_label")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Tree names and labels must not be empty")
        if not NAME_PATTERN.match(normalized):
            raise ValueError(
                f"{normalized!r} may only contain letters, digits, spaces, '-' and '_'"
            )
        return normalized

    @field_validator("default_duration")
    @classmethod
    def _check_duration(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Default duration must be at least one minute")
        return value

    @model_validator(mode="after")
    def _check_stages(self) -> "TreeTemplate":
        if not self.stages:
            raise ValueError("A tree needs at least one stage")
        dimensions = self.stages[0].dimensions
        if any(stage.dimensions != dimensions for stage in self.stages):
            raise ValueError("All stages of a tree must share the same dimensions")
        return self

    @property
    def stage_count(self) -> int:
        return len(self.stages)

    @property
    def dimensions(self) -> tuple[int, int]:
        return self.stages[0].dimensions

    @property
    def final_stage(self) -> Stage:
        return self.stages[-1]

    def stage_at(self, index: int) -> Stage:
        return self.stages[index]

    def renamed(self, name: str) -> "TreeTemplate":
        return self.model_copy(update={"name": name})

    def cost(self) -> int:
        """Minimum growth time in minutes; colourful trees take longer to grow."""

        stage = self.final_stage
        height, width = stage.dimensions
        full = 255.0 * height * width
        cells = [cell for row in stage.rows for cell in row]
        bg_peak = max(sum(c.bg[0] for c in cells), sum(c.bg[2] for c in cells))
        fg_peak = max(sum(c.fg[0] for c in cells), sum(c.fg[2] for c in cells))
        bg_cost = int(bg_peak / full * 12.0) * 5
        fg_cost = int(fg_peak / full * 8.0) * 5
        return 15 + bg_cost + fg_cost


__all__ = ["Cell", "NAME_PATTERN", "RGB", "Stage", "TreeTemplate"]
