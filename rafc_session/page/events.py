"""Window/document event target for a console tab."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Callable

from rafc_session.config.session import VISIBILITY_EVENT

logger = logging.getLogger(__name__)

EventListener = Callable[[str], Any]


class PageEvents:
    """Dispatches named page events (input, scroll, visibility) to listeners."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[EventListener]] = {}
        self._hidden = False

    @property
    def hidden(self) -> bool:
        return self._hidden

    def set_hidden(self, hidden: bool) -> None:
        if hidden == self._hidden:
            return
        self._hidden = hidden
        self.dispatch_event(VISIBILITY_EVENT)

    def add_event_listener(self, event_type: str, listener: EventListener) -> None:
        listeners = self._listeners.setdefault(event_type, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, event_type: str, listener: EventListener) -> None:
        listeners = self._listeners.get(event_type)
        if not listeners or listener not in listeners:
            return
        listeners.remove(listener)
        if not listeners:
            del self._listeners[event_type]

    def listener_count(self, event_type: str | None = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, ()))
        return sum(len(listeners) for listeners in self._listeners.values())

    def dispatch_event(self, event_type: str) -> None:
        for listener in list(self._listeners.get(event_type, ())):
            try:
                listener(event_type)
            except Exception:
                logger.debug("page listener for %s failed", event_type, exc_info=True)


__all__ = ["EventListener", "PageEvents"]
