"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from rafc_session.api.client import ApiClient
    from rafc_session.api.tokens import TokenStore
    from rafc_session.page.router import HistoryRouter
    from rafc_session.page.events import PageEvents
    from rafc_session.storage.tab import TabStorage
    from rafc_session.session.coordinator import InactivityLogoutCoordinator


@dataclass(slots=True)
class SessionRuntime:
    """Everything one console tab needs, wired together."""

    storage: TabStorage
    tokens: TokenStore
    api: ApiClient
    router: HistoryRouter
    page: PageEvents
    coordinator: InactivityLogoutCoordinator

    async def shutdown(self) -> None:
        self.coordinator.detach()
        try:
            await self.api.aclose()
        except Exception:
            logger.exception("session runtime shutdown failed")


__all__ = ["SessionRuntime"]
