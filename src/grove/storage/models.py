"""Data models for persistent tracking."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..templates.models import Stage


class Outcome(str, Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True, slots=True)
class SessionRecord:
    tree_name: str
    label: str
    start_time: datetime
    duration: int
    outcome: Outcome
    art: Stage | None = None

    @property
    def completed(self) -> bool:
        return self.outcome is Outcome.COMPLETED


__all__ = ["Outcome", "SessionRecord"]
