"""Origin-wide key/value storage shared by every tab."""

from __future__ import annotations

import logging
from pathlib import Path
from collections.abc import Callable

import orjson

from rafc_session.state.events import StorageEvent
from rafc_session.errors import StorageQuotaError, StorageUnavailableError

logger = logging.getLogger(__name__)

ChangeSink = Callable[[StorageEvent], None]


class SharedStorage:
    """String key/value store with change fan-out to the attached tab views.

    With `path` set, values are loaded from and saved to a JSON file so they
    survive restarts. `quota_bytes` caps the encoded size of all entries.
    """

    def __init__(
        self,
        *,
        path: str | Path | None = None,
        quota_bytes: int | None = None,
        enabled: bool = True,
    ) -> None:
        self._path = Path(path) if path is not None else None
        self._quota_bytes = quota_bytes
        self._enabled = enabled
        self._items: dict[str, str] = {}
        self._sinks: dict[int, ChangeSink] = {}
        if self._path is not None and self._path.exists():
            self._items = self._load(self._path)

    @staticmethod
    def _load(path: Path) -> dict[str, str]:
        try:
            data = orjson.loads(path.read_bytes())
        except Exception:
            logger.warning("storage file %s is unreadable; starting empty", path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_bytes(orjson.dumps(self._items))

    def _require_enabled(self) -> None:
        if not self._enabled:
            raise StorageUnavailableError()

    def _check_quota(self, key: str, value: str) -> None:
        if self._quota_bytes is None:
            return
        items = dict(self._items)
        items[key] = value
        size = sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in items.items())
        if size > self._quota_bytes:
            raise StorageQuotaError(key=key, quota_bytes=self._quota_bytes)

    def connect(self, view_id: int, sink: ChangeSink) -> None:
        self._sinks[view_id] = sink

    def disconnect(self, view_id: int) -> None:
        self._sinks.pop(view_id, None)

    def get(self, key: str) -> str | None:
        self._require_enabled()
        return self._items.get(key)

    def keys(self) -> list[str]:
        self._require_enabled()
        return list(self._items)

    def set(self, key: str, value: str, *, source: int | None = None) -> None:
        self._require_enabled()
        value = str(value)
        self._check_quota(key, value)
        old = self._items.get(key)
        self._items[key] = value
        self._save()
        if old != value:
            self._notify(StorageEvent(key=key, old_value=old, new_value=value), source)

    def remove(self, key: str, *, source: int | None = None) -> None:
        self._require_enabled()
        if key not in self._items:
            return
        old = self._items.pop(key)
        self._save()
        self._notify(StorageEvent(key=key, old_value=old, new_value=None), source)

    def clear(self, *, source: int | None = None) -> None:
        self._require_enabled()
        if not self._items:
            return
        self._items.clear()
        self._save()
        self._notify(StorageEvent(key=None, old_value=None, new_value=None), source)

    def _notify(self, event: StorageEvent, source: int | None) -> None:
        # The writing tab never sees its own change.
        for view_id, sink in list(self._sinks.items()):
            if view_id == source:
                continue
            try:
                sink(event)
            except Exception:
                logger.debug("storage listener failed for key=%s", event.key, exc_info=True)


__all__ = ["ChangeSink", "SharedStorage"]
