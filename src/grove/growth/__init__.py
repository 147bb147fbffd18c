"""Growth sessions: the timer state machine and its display collaborators."""

from .display import Display, GrowthFrame, PlainDisplay, RichDisplay
from .engine import GrowthEngine, SessionState, grow, resolve_template, stage_index
from .messages import ProgressAnnouncer

__all__ = [
    "Display",
    "GrowthEngine",
    "GrowthFrame",
    "PlainDisplay",
    "ProgressAnnouncer",
    "RichDisplay",
    "SessionState",
    "grow",
    "resolve_template",
    "stage_index",
]
