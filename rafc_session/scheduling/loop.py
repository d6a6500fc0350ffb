"""Wall-clock scheduler backed by the running asyncio loop."""

from __future__ import annotations

import time
import asyncio
from collections.abc import Callable

from .timer import RepeatingTimer


class AsyncioScheduler:
    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def now_ms(self) -> int:
        return int(time.time() * 1000)

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> RepeatingTimer:
        loop = self._loop or asyncio.get_running_loop()
        return RepeatingTimer(loop, interval_s, callback).start()


__all__ = ["AsyncioScheduler"]
