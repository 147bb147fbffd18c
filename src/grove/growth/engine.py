"""Session state machine that grows one tree."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import math
import random
import signal
import time
from datetime import datetime
from enum import Enum
from typing import Callable

from ..collection import TreeCollection
from ..errors import InvalidDurationError
from ..storage.history import HistorySink
from ..storage.models import Outcome, SessionRecord
from ..templates.builtin import DEFAULT_TREE_NAME, default_template
from ..templates.models import TreeTemplate
from .display import Display, GrowthFrame
from .messages import START_BANNER, ProgressAnnouncer

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 0.05


class SessionState(str, Enum):
    IDLE = "idle"
    GROWING = "growing"
    COMPLETED = "completed"
    ABORTED = "aborted"


_TRANSITIONS = {
    SessionState.IDLE: {SessionState.GROWING},
    SessionState.GROWING: {SessionState.COMPLETED, SessionState.ABORTED},
    SessionState.COMPLETED: set(),
    SessionState.ABORTED: set(),
}


def stage_index(elapsed: float, total: float, stage_count: int) -> int:
    """Map elapsed time onto a stage: ``floor(elapsed / total * N)`` clamped to ``[0, N-1]``."""

    if total <= 0:
        raise InvalidDurationError("Growth duration must be positive")
    if stage_count < 1:
        raise ValueError("A tree needs at least one stage")
    index = math.floor(elapsed / total * stage_count)
    return max(0, min(stage_count - 1, index))


def resolve_template(
    collection: TreeCollection,
    name: str | None,
    *,
    fallback: str = DEFAULT_TREE_NAME,
) -> TreeTemplate:
    """Find the tree to grow before any session exists.

    An explicit ``name`` must be in the collection. Without one the
    ``fallback`` name is used, and the built-in default tree stands in when
    the collection no longer holds ``default``.
    """

    if name is not None:
        return collection.require(name)
    template = collection.lookup(fallback)
    if template is not None:
        return template
    if fallback == DEFAULT_TREE_NAME:
        return default_template()
    return collection.require(fallback)


class GrowthEngine:
    """Grow ``template`` for ``duration`` minutes and record the outcome once."""

    def __init__(
        self,
        template: TreeTemplate,
        *,
        history: HistorySink,
        display: Display,
        duration: int | None = None,
        label: str | None = None,
        show_frames: bool = True,
        interval: float = DEFAULT_INTERVAL,
        clock: Callable[[], datetime] | None = None,
        monotonic: Callable[[], float] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._template = template
        self._duration = duration if duration is not None else template.default_duration
        if self._duration <= 0:
            raise InvalidDurationError("Growth duration must be at least one minute")
        self._label = label or template.default_label
        self._history = history
        self._display = display
        self._show_frames = show_frames
        self._interval = interval
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._monotonic = monotonic or time.monotonic
        self._rng = rng
        self._state = SessionState.IDLE
        self._start_time: datetime | None = None
        self._record: SessionRecord | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def total_seconds(self) -> float:
        return self._duration * 60.0

    @property
    def record(self) -> SessionRecord | None:
        return self._record

    def _transition(self, target: SessionState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise RuntimeError(f"Cannot move a session from {self._state.value} to {target.value}")
        logger.debug("Session %s -> %s", self._state.value, target.value)
        self._state = target

    def _frame(self, elapsed: float, message: str) -> GrowthFrame:
        index = stage_index(elapsed, self.total_seconds, self._template.stage_count)
        return GrowthFrame(
            tree_name=self._template.name,
            label=self._label,
            stage=self._template.stage_at(index),
            stage_index=index,
            stage_count=self._template.stage_count,
            elapsed=elapsed,
            remaining=self.total_seconds - elapsed,
            message=message,
        )

    def _finish(self, state: SessionState) -> SessionRecord:
        self._transition(state)
        assert self._start_time is not None
        record = SessionRecord(
            tree_name=self._template.name,
            label=self._label,
            start_time=self._start_time,
            duration=self._duration,
            outcome=Outcome.COMPLETED if state is SessionState.COMPLETED else Outcome.ABORTED,
            art=self._template.final_stage,
        )
        self._record = record
        self._history.append(record)
        return record

    async def _wait_tick(self, cancel: asyncio.Event) -> None:
        try:
            await asyncio.wait_for(cancel.wait(), timeout=self._interval)
        except asyncio.TimeoutError:
            pass

    async def run(self, cancel: asyncio.Event | None = None) -> SessionRecord:
        """Grow until the duration elapses or ``cancel`` is set.

        Exactly one record is appended to the history, including when the
        surrounding task is cancelled.
        """

        cancel = cancel or asyncio.Event()
        self._transition(SessionState.GROWING)
        self._start_time = self._clock()
        started = self._monotonic()
        total = self.total_seconds
        announcer = ProgressAnnouncer(total, self._rng)
        message = ""
        logger.info(
            "Growing '%s' for %d minute(s) with label '%s'",
            self._template.name,
            self._duration,
            self._label,
        )

        if not self._show_frames:
            for line in START_BANNER:
                self._display.show_line(line)

        try:
            while True:
                elapsed = self._monotonic() - started
                if elapsed >= total:
                    outcome = SessionState.COMPLETED
                    break
                if cancel.is_set():
                    outcome = SessionState.ABORTED
                    break

                announcement = announcer.update(total - elapsed)
                if announcement is not None:
                    message = announcement
                    if not self._show_frames:
                        self._display.show_line(message)
                if self._show_frames:
                    self._display.show_frame(self._frame(elapsed, message))

                await self._wait_tick(cancel)
        except asyncio.CancelledError:
            self._display.close()
            self._finish(SessionState.ABORTED)
            raise

        self._display.close()
        return self._finish(outcome)


async def _grow_until_interrupted(engine: GrowthEngine) -> SessionRecord:
    cancel = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel.set)
    except (NotImplementedError, RuntimeError):  # pragma: no cover - platform specific
        logger.debug("SIGINT handler unavailable; relying on task cancellation")
    try:
        return await engine.run(cancel)
    finally:
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.remove_signal_handler(signal.SIGINT)


def grow(engine: GrowthEngine) -> SessionRecord:
    """Run ``engine`` on a fresh event loop, turning CTRL+C into an abort."""

    return asyncio.run(_grow_until_interrupted(engine))


__all__ = [
    "DEFAULT_INTERVAL",
    "GrowthEngine",
    "SessionState",
    "grow",
    "resolve_template",
    "stage_index",
]
