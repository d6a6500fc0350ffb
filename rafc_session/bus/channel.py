"""Logout propagation through a named broadcast channel."""

from __future__ import annotations

import logging

from rafc_session.channels.base import ChannelFactory, BroadcastChannel
from rafc_session.config.session import MSG_ACTIVITY_PING, MSG_FORCE_LOGOUT

from .base import Signal

logger = logging.getLogger(__name__)


class ChannelTransport:
    """Inert when the factory cannot open a channel; storage stays the baseline."""

    def __init__(self, factory: ChannelFactory, name: str) -> None:
        self._factory = factory
        self._name = name
        self._channel: BroadcastChannel | None = None

    @property
    def supported(self) -> bool:
        return self._channel is not None

    def open(self, on_force_logout: Signal, on_activity_ping: Signal) -> None:
        if self._channel is not None:
            return
        try:
            channel = self._factory(self._name)
        except Exception:
            logger.debug("broadcast channel %s unavailable", self._name, exc_info=True)
            return

        def _on_message(data: str) -> None:
            if data == MSG_FORCE_LOGOUT:
                on_force_logout()
            elif data == MSG_ACTIVITY_PING:
                on_activity_ping()

        channel.on_message = _on_message
        self._channel = channel

    def announce_logout(self) -> None:
        if self._channel is not None:
            self._channel.post_message(MSG_FORCE_LOGOUT)

    def close(self) -> None:
        channel, self._channel = self._channel, None
        if channel is not None:
            channel.close()


__all__ = ["ChannelTransport"]
