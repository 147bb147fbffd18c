"""Render statistics views as rich text lines."""

from __future__ import annotations

from typing import Iterable, Sequence

from rich.text import Text

from ..rendering import stage_line
from ..storage.models import SessionRecord
from ..templates.builtin import default_template
from ..templates.models import Stage
from ..timespec import format_duration
from .graph import Bucket, GraphMetric
from .grid import Grid

BAR_STYLE = "on rgb(30,110,0)"
MUTED_STYLE = "grey58"


def record_art(record: SessionRecord) -> Stage:
    """Art for a history record; aborted trees are drawn withered."""

    art = record.art if record.art is not None else default_template().final_stage
    return art if record.completed else art.withered()


def render_listing(records: Iterable[SessionRecord], date_format: str) -> list[Text]:
    lines: list[Text] = []
    for record in records:
        line = Text(
            f"{record.label} | {record.start_time.strftime(date_format)} | "
            f"{format_duration(record.duration)}"
        )
        if not record.completed:
            line.append(" | died", style=MUTED_STYLE)
        lines.append(line)
    return lines


def render_grid(grid: Grid, *, tree_size: tuple[int, int] = (5, 5)) -> list[Text]:
    """Draw the grid with ``|``/``-``/``+`` separators between trees."""

    tree_height, tree_width = tree_size
    blank = " " * tree_width
    lines: list[Text] = []
    for r, row in enumerate(grid.slots):
        if r:
            lines.append(Text("+".join("-" * tree_width for _ in row)))
        arts = [record_art(slot) if slot is not None else None for slot in row]
        for line in range(tree_height):
            text = Text()
            for c, art in enumerate(arts):
                if c:
                    text.append("|")
                if art is not None and line < art.dimensions[0]:
                    segment = stage_line(art, line)
                    segment.truncate(tree_width, pad=True)
                    text.append_text(segment)
                else:
                    text.append(blank)
            lines.append(text)
    if grid.truncated:
        lines.append(Text(f"... {grid.truncated} more tree(s) not shown", style=MUTED_STYLE))
    return lines


def _format_value(value: int, metric: GraphMetric) -> str:
    return format_duration(value) if metric is GraphMetric.DURATION else str(value)


def render_graph(
    buckets: Sequence[Bucket],
    *,
    width: int = 80,
    metric: GraphMetric = GraphMetric.DURATION,
) -> list[Text]:
    """One horizontal bar per bucket, scaled so the largest fills the width."""

    if not buckets:
        return []
    label_width = max(len(bucket.label) for bucket in buckets)
    value_width = max(len(_format_value(bucket.value, metric)) for bucket in buckets)
    max_width = max(1, width - label_width - value_width - 3)
    peak = max(1, max(bucket.value for bucket in buckets))

    lines: list[Text] = []
    for bucket in buckets:
        text = Text(f"{bucket.label:>{label_width}}|")
        text.append(" " * (max_width * bucket.value // peak), style=BAR_STYLE)
        text.append(f" {_format_value(bucket.value, metric)}", style=MUTED_STYLE)
        lines.append(text)
    return lines


__all__ = ["record_art", "render_graph", "render_grid", "render_listing"]
