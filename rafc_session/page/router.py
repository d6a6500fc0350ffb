"""History-stack router for the console views."""

from __future__ import annotations

import logging
from typing import Any
from dataclasses import field, dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    path: str
    state: dict[str, Any] = field(default_factory=dict)


class HistoryRouter:
    def __init__(self, initial_path: str = "/") -> None:
        self._entries: list[HistoryEntry] = [HistoryEntry(initial_path)]

    @property
    def current(self) -> str:
        return self._entries[-1].path

    @property
    def current_state(self) -> dict[str, Any]:
        return dict(self._entries[-1].state)

    @property
    def history(self) -> tuple[str, ...]:
        return tuple(entry.path for entry in self._entries)

    def navigate(self, path: str, *, replace: bool = False, state: dict[str, Any] | None = None) -> bool:
        """Returns False when a replace would land on the current view."""
        if not path.startswith("/"):
            raise ValueError(f"navigation target must be an absolute path: {path!r}")
        entry = HistoryEntry(path, dict(state or {}))
        if replace:
            if self._entries[-1].path == path and not state:
                return False
            self._entries[-1] = entry
        else:
            self._entries.append(entry)
        logger.debug("navigate %s (replace=%s)", path, replace)
        return True

    def navigate_replace(self, path: str) -> bool:
        return self.navigate(path, replace=True)

    def back(self) -> str:
        if len(self._entries) > 1:
            self._entries.pop()
        return self.current


__all__ = ["HistoryEntry", "HistoryRouter"]
