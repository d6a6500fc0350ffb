"""Broadcast channel interface."""

from __future__ import annotations

from typing import Protocol
from collections.abc import Callable

MessageHandler = Callable[[str], None]
ChannelFactory = Callable[[str], "BroadcastChannel"]


class BroadcastChannel(Protocol):
    """Named channel; messages reach every other open channel of the same name."""

    name: str
    on_message: MessageHandler | None

    def post_message(self, data: str) -> None: ...

    def close(self) -> None: ...


__all__ = ["BroadcastChannel", "ChannelFactory", "MessageHandler"]
