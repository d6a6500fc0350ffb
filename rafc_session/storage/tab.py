"""Per-tab view over the shared storage."""

from __future__ import annotations

import logging
import itertools
from collections.abc import Callable

from rafc_session.state.events import StorageEvent

from .shared import SharedStorage

logger = logging.getLogger(__name__)

StorageListener = Callable[[StorageEvent], None]

_view_ids = itertools.count(1)


class TabStorage:
    """What one tab sees: reads and writes go to the shared backing, change
    events arrive only for writes made by other tabs."""

    def __init__(self, shared: SharedStorage) -> None:
        self._shared = shared
        self._id = next(_view_ids)
        self._listeners: list[StorageListener] = []
        shared.connect(self._id, self._dispatch)

    @property
    def shared(self) -> SharedStorage:
        return self._shared

    def get_item(self, key: str) -> str | None:
        return self._shared.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._shared.set(key, value, source=self._id)

    def remove_item(self, key: str) -> None:
        self._shared.remove(key, source=self._id)

    def clear(self) -> None:
        self._shared.clear(source=self._id)

    def add_listener(self, listener: StorageListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: StorageListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def close(self) -> None:
        self._listeners.clear()
        self._shared.disconnect(self._id)

    def _dispatch(self, event: StorageEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.debug("storage listener failed for key=%s", event.key, exc_info=True)


__all__ = ["StorageListener", "TabStorage"]
