"""Idle watchdog for one relay connection."""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable

from rafc_session.config.relay import (
    RELAY_IDLE_TIMEOUT_S,
    RELAY_CLOSE_IDLE_CODE,
    RELAY_WATCHDOG_TICK_S,
    RELAY_CLOSE_IDLE_REASON,
)

logger = logging.getLogger(__name__)


class RelayLifecycle:
    """Closes a channel member that has not sent a frame for `idle_timeout_s`.

    Tabs keep their relay socket open for the whole session, so a member that
    stays silent past the timeout is treated as gone. Only frames the member
    sends count; frames relayed to it do not. A timeout of 0 disables the close.
    """

    def __init__(
        self,
        websocket: Any,
        channel: str,
        *,
        idle_timeout_s: float | None = None,
        watchdog_tick_s: float | None = None,
        now_fn: Callable[[], float] | None = None,
    ) -> None:
        self._ws = websocket
        self.channel = channel
        self.idle_timeout_s = float(RELAY_IDLE_TIMEOUT_S if idle_timeout_s is None else idle_timeout_s)
        self.watchdog_tick_s = float(RELAY_WATCHDOG_TICK_S if watchdog_tick_s is None else watchdog_tick_s)
        self._now = now_fn or time.monotonic
        self._last_frame_at = self._now()
        self._frames = 0
        self._closed_for_idle = False
        self._done = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def frames(self) -> int:
        return self._frames

    @property
    def closed_for_idle(self) -> bool:
        return self._closed_for_idle

    def record_frame(self) -> None:
        self._frames += 1
        self._last_frame_at = self._now()

    def idle_for(self) -> float:
        return max(0.0, self._now() - self._last_frame_at)

    def expired(self) -> bool:
        return self.idle_timeout_s > 0 and self.idle_for() >= self.idle_timeout_s

    def should_close(self) -> bool:
        return self._done.is_set()

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._watch())
        return self._task

    async def stop(self) -> None:
        self._done.set()
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(Exception, asyncio.CancelledError):
            await task

    async def close_if_idle(self) -> bool:
        if self._done.is_set() or not self.expired():
            return False
        self._closed_for_idle = True
        self._done.set()
        logger.info(
            "closing idle member of %s after %.0fs (%d frames relayed)", self.channel, self.idle_for(), self._frames
        )
        with contextlib.suppress(Exception):
            await self._ws.close(code=RELAY_CLOSE_IDLE_CODE, reason=RELAY_CLOSE_IDLE_REASON)
        return True

    async def _watch(self) -> None:
        try:
            while not self._done.is_set():
                await asyncio.sleep(self.watchdog_tick_s)
                if await self.close_if_idle():
                    return
        except asyncio.CancelledError:
            return
        except Exception:
            logger.debug("idle watchdog for %s stopped unexpectedly", self.channel, exc_info=True)


__all__ = ["RelayLifecycle"]
