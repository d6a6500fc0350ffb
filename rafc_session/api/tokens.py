"""Bearer token storage."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Callable

from rafc_session.config.api import TOKEN_KEY
from rafc_session.storage.tab import TabStorage
from rafc_session.state.events import StorageEvent

logger = logging.getLogger(__name__)

TokenListener = Callable[[str | None], None]


class TokenStore:
    """Token under one shared-storage key.

    Listeners hear every change of that key: writes made through this store
    and writes made by other tabs.
    """

    def __init__(self, storage: TabStorage, key: str = TOKEN_KEY) -> None:
        self._storage = storage
        self._key = key
        self._listeners: list[TokenListener] = []
        storage.add_listener(self._on_storage_event)

    @property
    def key(self) -> str:
        return self._key

    def get_token(self) -> str | None:
        return self._storage.get_item(self._key) or None

    def set_token(self, token: Any) -> bool:
        if not token or not isinstance(token, str):
            return False
        self._storage.set_item(self._key, token)
        self._notify(token)
        return True

    def clear_token(self) -> None:
        self._storage.remove_item(self._key)
        self._notify(None)

    def add_listener(self, listener: TokenListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: TokenListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _on_storage_event(self, event: StorageEvent) -> None:
        if event.key == self._key or event.key is None:
            self._notify(event.new_value or None)

    def _notify(self, token: str | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(token)
            except Exception:
                logger.debug("token listener failed", exc_info=True)


__all__ = ["TokenListener", "TokenStore"]
