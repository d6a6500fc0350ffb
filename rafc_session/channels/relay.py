"""Broadcast channel carried over the websocket relay service."""

from __future__ import annotations

import asyncio
import logging
import contextlib
import collections
from typing import Any
from urllib.parse import quote, urlencode
from collections.abc import Callable

import orjson
import websockets

from rafc_session.errors import ChannelUnsupportedError
from rafc_session.config.relay import (
    RELAY_KEY_DATA,
    RELAY_KEY_TYPE,
    RELAY_TYPE_ERROR,
    RELAY_KEY_CHANNEL,
    RELAY_KEY_PAYLOAD,
    RELAY_TYPE_MESSAGE,
    RELAY_ENDPOINT_PATH,
    RELAY_CLIENT_MAX_PENDING,
)

from .base import MessageHandler

logger = logging.getLogger(__name__)

ConnectFn = Callable[..., Any]


def build_channel_url(base_url: str, name: str, api_key: str = "") -> str:
    url = base_url.rstrip("/") + RELAY_ENDPOINT_PATH.format(channel=quote(name, safe=""))
    if api_key:
        url = f"{url}?{urlencode({'api_key': api_key})}"
    return url


class RelayBroadcastChannel:
    """Posting never blocks: frames queue up and a background task drains them
    in order once the relay connection is up. Reconnects until closed.

    At most `max_pending` frames wait while the relay is unreachable; posting
    past that drops the oldest one.
    """

    def __init__(
        self,
        name: str,
        *,
        url: str,
        api_key: str = "",
        connect_fn: ConnectFn | None = None,
        reconnect_delay_s: float = 1.0,
        max_pending: int = RELAY_CLIENT_MAX_PENDING,
    ) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            raise ChannelUnsupportedError(name=name, reason="no running event loop") from exc

        self.name = name
        self.on_message: MessageHandler | None = None
        self._url = build_channel_url(url, name, api_key)
        self._connect_fn = connect_fn or websockets.connect
        self._reconnect_delay_s = max(0.0, float(reconnect_delay_s))
        self._max_pending = max(1, int(max_pending))
        self._pending: collections.deque[str] = collections.deque()
        self._has_pending = asyncio.Event()
        self._dropped = 0
        self._connected = asyncio.Event()
        self._closed = False
        self._task = loop.create_task(self._run())

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return len(self._pending)

    @property
    def dropped(self) -> int:
        return self._dropped

    async def wait_connected(self, timeout: float | None = None) -> bool:
        try:
            await asyncio.wait_for(self._connected.wait(), timeout=timeout)
        except TimeoutError:
            return False
        return True

    def post_message(self, data: str) -> None:
        if self._closed:
            raise RuntimeError(f"broadcast channel {self.name!r} is closed")
        frame = {RELAY_KEY_TYPE: RELAY_TYPE_MESSAGE, RELAY_KEY_CHANNEL: self.name, RELAY_KEY_DATA: data}
        if len(self._pending) >= self._max_pending:
            self._pending.popleft()
            self._dropped += 1
            logger.warning("relay channel %s: %d frames pending, dropping the oldest", self.name, self._max_pending)
        self._pending.append(orjson.dumps(frame).decode("utf-8"))
        self._has_pending.set()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.on_message = None
        self._task.cancel()

    async def aclose(self) -> None:
        self.close()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await self._task

    async def _run(self) -> None:
        while not self._closed:
            try:
                async with self._connect_fn(self._url, ping_interval=20, ping_timeout=20) as ws:
                    self._connected.set()
                    await self._pump(ws)
            except asyncio.CancelledError:
                return
            except Exception:
                logger.debug("relay channel %s disconnected", self.name, exc_info=True)
            finally:
                self._connected.clear()
            if self._closed:
                return
            await asyncio.sleep(self._reconnect_delay_s)

    async def _pump(self, ws: Any) -> None:
        tasks = {asyncio.create_task(self._send_loop(ws)), asyncio.create_task(self._receive_loop(ws))}
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                task.cancel()
            for task in tasks:
                with contextlib.suppress(asyncio.CancelledError, Exception):
                    await task
        for task in done:
            if not task.cancelled():
                task.result()

    async def _receive_loop(self, ws: Any) -> None:
        async for raw in ws:
            self._dispatch(raw)

    async def _send_loop(self, ws: Any) -> None:
        while True:
            if not self._pending:
                self._has_pending.clear()
                await self._has_pending.wait()
                continue
            # The head stays queued until sent, so a failed send is retried first.
            text = self._pending[0]
            await ws.send(text)
            if self._pending and self._pending[0] is text:
                self._pending.popleft()

    def _dispatch(self, raw: str | bytes) -> None:
        try:
            frame = orjson.loads(raw)
        except Exception:
            logger.debug("relay channel %s: dropping non-JSON frame", self.name)
            return
        if not isinstance(frame, dict):
            return
        msg_type = frame.get(RELAY_KEY_TYPE)
        if msg_type == RELAY_TYPE_ERROR:
            logger.warning("relay channel %s error: %s", self.name, frame.get(RELAY_KEY_PAYLOAD))
            return
        data = frame.get(RELAY_KEY_DATA)
        handler = self.on_message
        if msg_type != RELAY_TYPE_MESSAGE or not isinstance(data, str) or handler is None:
            return
        try:
            handler(data)
        except Exception:
            logger.debug("relay channel %s handler failed", self.name, exc_info=True)


__all__ = ["RelayBroadcastChannel", "build_channel_url"]
