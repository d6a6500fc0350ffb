"""Deterministic scheduler with a virtual clock."""

from __future__ import annotations

import logging
import itertools
from dataclasses import field, dataclass
from collections.abc import Callable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ManualTimer:
    interval_ms: int
    callback: Callable[[], None]
    due_ms: int
    seq: int
    cancelled: bool = field(default=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Time only moves when `advance` is called; due timers fire in order."""

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self._now_ms = int(start_ms)
        self._timers: list[ManualTimer] = []
        self._seq = itertools.count()

    def now_ms(self) -> int:
        return self._now_ms

    @property
    def active_timers(self) -> int:
        return sum(1 for timer in self._timers if not timer.cancelled)

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> ManualTimer:
        interval_ms = max(1, int(round(interval_s * 1000)))
        timer = ManualTimer(
            interval_ms=interval_ms,
            callback=callback,
            due_ms=self._now_ms + interval_ms,
            seq=next(self._seq),
        )
        self._timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        target = self._now_ms + int(round(seconds * 1000))
        while True:
            self._timers = [timer for timer in self._timers if not timer.cancelled]
            due = [timer for timer in self._timers if timer.due_ms <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due_ms, t.seq))
            self._now_ms = timer.due_ms
            timer.due_ms += timer.interval_ms
            try:
                timer.callback()
            except Exception:
                logger.debug("manual timer callback failed", exc_info=True)
        self._now_ms = target


__all__ = ["ManualScheduler", "ManualTimer"]
