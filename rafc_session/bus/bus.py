"""Logout bus: one interface over redundant cross-tab transports."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .base import Signal, LogoutTransport

logger = logging.getLogger(__name__)


class LogoutBus:
    """Fans every operation out to all transports; a failing transport never
    keeps the others from running."""

    def __init__(self, transports: Sequence[LogoutTransport]) -> None:
        self._transports = list(transports)
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def transports(self) -> tuple[LogoutTransport, ...]:
        return tuple(self._transports)

    def open(self, on_force_logout: Signal, on_activity_ping: Signal) -> None:
        if self._open:
            return
        self._open = True
        for transport in self._transports:
            try:
                transport.open(on_force_logout, on_activity_ping)
            except Exception:
                logger.debug("logout transport %r failed to open", transport, exc_info=True)

    def announce_logout(self) -> None:
        for transport in self._transports:
            try:
                transport.announce_logout()
            except Exception:
                logger.debug("logout transport %r failed to announce", transport, exc_info=True)

    def close(self) -> None:
        self._open = False
        for transport in self._transports:
            try:
                transport.close()
            except Exception:
                logger.debug("logout transport %r failed to close", transport, exc_info=True)


__all__ = ["LogoutBus"]
