"""Encouragement shown while a tree grows."""

from __future__ import annotations

import math
import random

ENCOURAGEMENTS = (
    "Keep going, your tree is growing!",
    "Roots are forming. Stay with it.",
    "Nice focus. The leaves are coming in.",
    "One thing at a time. You're doing great.",
)

START_BANNER = (
    "Started growing your tree!",
    "If you ever want to cancel, you can CTRL+C",
    "But then your tree will die ;(",
)

_STEP = 5 * 60


class ProgressAnnouncer:
    """Emit one message per five-minute milestone of remaining time.

    Whole hours get an hour count, every ten minutes under an hour gets a
    minute count, any other milestone gets a random encouragement. When a
    tick skips several milestones only the most recent is announced.
    """

    def __init__(self, total_seconds: float, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._last_bucket = self._bucket(total_seconds)

    @staticmethod
    def _bucket(remaining: float) -> int:
        return math.ceil(remaining / _STEP)

    def update(self, remaining: float) -> str | None:
        bucket = self._bucket(max(0.0, remaining))
        if bucket >= self._last_bucket:
            return None
        self._last_bucket = bucket
        milestone = bucket * _STEP
        if milestone <= 0:
            return None
        if milestone >= 3600 and milestone % 3600 == 0:
            return f"Hang in there! You got {milestone // 3600}h left!"
        if milestone < 3600 and milestone % 600 == 0:
            return f"You're close! You got {milestone // 60}m left!"
        return self._rng.choice(ENCOURAGEMENTS)


__all__ = ["ENCOURAGEMENTS", "ProgressAnnouncer", "START_BANNER"]
