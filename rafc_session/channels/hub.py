"""In-process registry of named broadcast channels."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .local import LocalBroadcastChannel

logger = logging.getLogger(__name__)


class BroadcastHub:
    def __init__(self) -> None:
        self._members: dict[str, list[LocalBroadcastChannel]] = {}

    def join(self, channel: LocalBroadcastChannel) -> None:
        self._members.setdefault(channel.name, []).append(channel)

    def leave(self, channel: LocalBroadcastChannel) -> None:
        members = self._members.get(channel.name)
        if not members:
            return
        if channel in members:
            members.remove(channel)
        if not members:
            self._members.pop(channel.name, None)

    def member_count(self, name: str) -> int:
        return len(self._members.get(name, ()))

    def deliver(self, sender: LocalBroadcastChannel, data: str) -> int:
        delivered = 0
        for member in list(self._members.get(sender.name, ())):
            if member is sender:
                continue
            handler = member.on_message
            if handler is None:
                continue
            try:
                handler(data)
            except Exception:
                logger.debug("broadcast handler failed on channel %s", sender.name, exc_info=True)
            delivered += 1
        return delivered


__all__ = ["BroadcastHub"]
