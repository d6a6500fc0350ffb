"""Interfaces the coordinator needs from its collaborators."""

from __future__ import annotations

from typing import Any, Protocol
from collections.abc import Callable

RequestObserver = Callable[[Any], None]


class ActivityObserverHost(Protocol):
    """Anything that reports outgoing requests, e.g. the API client."""

    def register_activity_observer(self, observer: RequestObserver) -> int: ...

    def unregister_activity_observer(self, observer_id: int) -> bool: ...


__all__ = ["ActivityObserverHost", "RequestObserver"]
