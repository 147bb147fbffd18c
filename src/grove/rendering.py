"""Turn tree art into rich renderables."""

from __future__ import annotations

from typing import Protocol

from rich.color import Color
from rich.style import Style
from rich.text import Text

from .templates.models import Cell, Stage


class StagedArt(Protocol):
    """Anything exposing growth stages can be rendered; templates are one example."""

    @property
    def stage_count(self) -> int:
        ...

    @property
    def dimensions(self) -> tuple[int, int]:
        ...

    def stage_at(self, index: int) -> Stage:
        ...


def cell_style(cell: Cell) -> Style:
    return Style(color=Color.from_rgb(*cell.fg), bgcolor=Color.from_rgb(*cell.bg))


def stage_line(stage: Stage, line: int) -> Text:
    text = Text()
    for cell in stage.rows[line]:
        text.append(cell.symbol, style=cell_style(cell))
    return text


def render_stage(stage: Stage) -> Text:
    height, _ = stage.dimensions
    return Text("\n").join(stage_line(stage, line) for line in range(height))


def render_art(art: StagedArt, index: int) -> Text:
    index = max(0, min(art.stage_count - 1, index))
    return render_stage(art.stage_at(index))


__all__ = ["StagedArt", "cell_style", "render_art", "render_stage", "stage_line"]
