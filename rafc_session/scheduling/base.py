"""Scheduler interface used by the idle check."""

from __future__ import annotations

from typing import Protocol
from collections.abc import Callable


class Timer(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def now_ms(self) -> int:
        """Current epoch time in milliseconds."""
        ...

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> Timer:
        """Run `callback` every `interval_s` seconds until the timer is cancelled."""
        ...


__all__ = ["Scheduler", "Timer"]
