"""Relay admission control and channel membership."""

from __future__ import annotations

import asyncio
from typing import Any


class ChannelHub:
    def __init__(self, *, max_connections: int) -> None:
        self._max = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._channels: dict[str, dict[int, Any]] = {}
        self._active: set[int] = set()

    async def connect(self, channel: str, ws: Any) -> bool:
        """Attempt to admit a websocket to a channel (without accepting it)."""
        key = id(ws)
        async with self._lock:
            if len(self._active) >= self._max:
                return False
            self._active.add(key)
            self._channels.setdefault(channel, {})[key] = ws
            return True

    async def disconnect(self, channel: str, ws: Any) -> None:
        key = id(ws)
        async with self._lock:
            self._active.discard(key)
            members = self._channels.get(channel)
            if members is None:
                return
            members.pop(key, None)
            if not members:
                del self._channels[channel]

    def peers(self, channel: str, ws: Any) -> list[Any]:
        key = id(ws)
        return [member for member_key, member in self._channels.get(channel, {}).items() if member_key != key]

    def get_connection_count(self) -> int:
        return len(self._active)

    def get_channel_size(self, channel: str) -> int:
        return len(self._channels.get(channel, ()))


__all__ = ["ChannelHub"]
