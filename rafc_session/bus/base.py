"""Transport interface for the logout bus."""

from __future__ import annotations

from typing import Protocol
from collections.abc import Callable

Signal = Callable[[], None]


class LogoutTransport(Protocol):
    def open(self, on_force_logout: Signal, on_activity_ping: Signal) -> None: ...

    def announce_logout(self) -> None: ...

    def close(self) -> None: ...


__all__ = ["LogoutTransport", "Signal"]
