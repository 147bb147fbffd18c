"""Display collaborators fed by the growth engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from rich.align import Align
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ..rendering import render_stage
from ..templates.models import Stage
from ..timespec import format_clock

BORDER_STYLE = "rgb(14,48,23)"
TEXT_STYLE = "rgb(117,199,139) on rgb(44,77,52)"


@dataclass(frozen=True, slots=True)
class GrowthFrame:
    """Everything needed to draw one tick of a growing tree."""

    tree_name: str
    label: str
    stage: Stage
    stage_index: int
    stage_count: int
    elapsed: float
    remaining: float
    message: str = ""


class Display(Protocol):
    """Protocol for the output surface used while a tree grows."""

    def show_frame(self, frame: GrowthFrame) -> None:
        ...

    def show_line(self, text: str) -> None:
        ...

    def close(self) -> None:
        ...


class PlainDisplay:
    """Line-oriented output for ``grow --no-display``."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def show_frame(self, frame: GrowthFrame) -> None:
        return None

    def show_line(self, text: str) -> None:
        self._console.print(text, highlight=False)

    def close(self) -> None:
        return None


def build_frame_panel(frame: GrowthFrame) -> Panel:
    tree = Panel(
        Align.center(render_stage(frame.stage)),
        border_style=BORDER_STYLE,
        expand=False,
    )
    body = Group(
        Text(f"left: {format_clock(frame.remaining)}", style=TEXT_STYLE),
        Align.center(tree),
        Text(frame.message, style=TEXT_STYLE),
    )
    return Panel(
        body,
        title=f"{frame.tree_name} [{frame.label}]",
        subtitle=f"stage {frame.stage_index + 1}/{frame.stage_count}",
        border_style=BORDER_STYLE,
        style=TEXT_STYLE,
    )


class RichDisplay:
    """Full-screen live view of the growing tree."""

    def __init__(self, console: Console | None = None, *, refresh_per_second: float = 10) -> None:
        self._console = console or Console()
        self._refresh_per_second = refresh_per_second
        self._live: Live | None = None

    def show_frame(self, frame: GrowthFrame) -> None:
        panel = build_frame_panel(frame)
        if self._live is None:
            self._live = Live(
                panel,
                console=self._console,
                screen=True,
                auto_refresh=False,
                refresh_per_second=self._refresh_per_second,
            )
            self._live.start()
        self._live.update(panel, refresh=True)

    def show_line(self, text: str) -> None:
        self._console.print(text, highlight=False)

    def close(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None


__all__ = ["Display", "GrowthFrame", "PlainDisplay", "RichDisplay", "build_frame_panel"]
