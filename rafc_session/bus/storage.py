"""Logout propagation through the shared storage signal key."""

from __future__ import annotations

from collections.abc import Callable

from rafc_session.storage.tab import TabStorage
from rafc_session.state.events import StorageEvent

from .base import Signal


def _parse_ms(raw: str | None) -> int:
    try:
        return int(raw or "0")
    except (TypeError, ValueError):
        return 0


class StorageTransport:
    """Other tabs react to any change of the signal key; the value only has to
    differ from the previous one."""

    def __init__(self, storage: TabStorage, signal_key: str, now_ms: Callable[[], int]) -> None:
        self._storage = storage
        self._signal_key = signal_key
        self._now_ms = now_ms
        self._on_force_logout: Signal | None = None

    def open(self, on_force_logout: Signal, on_activity_ping: Signal) -> None:
        if self._on_force_logout is not None:
            return
        self._on_force_logout = on_force_logout
        self._storage.add_listener(self._on_storage)

    def announce_logout(self) -> None:
        try:
            previous = _parse_ms(self._storage.get_item(self._signal_key))
        except Exception:
            previous = 0
        value = max(self._now_ms(), previous + 1)
        self._storage.set_item(self._signal_key, str(value))

    def close(self) -> None:
        self._storage.remove_listener(self._on_storage)
        self._on_force_logout = None

    def _on_storage(self, event: StorageEvent) -> None:
        handler = self._on_force_logout
        if handler is None:
            return
        if event.key == self._signal_key and event.new_value:
            handler()


__all__ = ["StorageTransport"]
