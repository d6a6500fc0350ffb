"""Broadcast channel delivered through an in-process hub."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import MessageHandler

if TYPE_CHECKING:
    from .hub import BroadcastHub


class LocalBroadcastChannel:
    def __init__(self, hub: BroadcastHub, name: str) -> None:
        self.name = name
        self.on_message: MessageHandler | None = None
        self._hub = hub
        self._closed = False
        hub.join(self)

    @property
    def closed(self) -> bool:
        return self._closed

    def post_message(self, data: str) -> None:
        if self._closed:
            raise RuntimeError(f"broadcast channel {self.name!r} is closed")
        self._hub.deliver(self, data)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.on_message = None
        self._hub.leave(self)


__all__ = ["LocalBroadcastChannel"]
