"""Storage change notifications (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StorageEvent:
    """A change made by another tab; `key` is None when the storage was cleared."""

    key: str | None
    old_value: str | None
    new_value: str | None


__all__ = ["StorageEvent"]
