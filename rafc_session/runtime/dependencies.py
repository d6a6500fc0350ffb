"""Runtime dependency construction for one console tab."""

from __future__ import annotations

import logging

import httpx

from rafc_session.bus import LogoutBus, ChannelTransport, StorageTransport
from rafc_session.state import SessionRuntime
from rafc_session.api.client import ApiClient
from rafc_session.api.tokens import TokenStore
from rafc_session.page.events import PageEvents
from rafc_session.page.router import HistoryRouter
from rafc_session.storage.tab import TabStorage
from rafc_session.channels.base import ChannelFactory
from rafc_session.storage.shared import SharedStorage
from rafc_session.scheduling.base import Scheduler
from rafc_session.state.settings import ApiSettings, CoordinatorSettings
from rafc_session.session.coordinator import InactivityLogoutCoordinator

logger = logging.getLogger(__name__)


def build_logout_bus(
    storage: TabStorage,
    settings: CoordinatorSettings,
    scheduler: Scheduler,
    channel_factory: ChannelFactory | None = None,
) -> LogoutBus:
    transports: list[StorageTransport | ChannelTransport] = [
        StorageTransport(storage, settings.logout_signal_key, scheduler.now_ms),
    ]
    if channel_factory is not None:
        transports.append(ChannelTransport(channel_factory, settings.channel_name))
    return LogoutBus(transports)


def build_session_runtime(
    shared: SharedStorage,
    *,
    scheduler: Scheduler,
    api_settings: ApiSettings,
    settings: CoordinatorSettings | None = None,
    channel_factory: ChannelFactory | None = None,
    initial_path: str = "/",
    transport: httpx.AsyncBaseTransport | None = None,
) -> SessionRuntime:
    settings = settings or CoordinatorSettings()
    storage = TabStorage(shared)
    tokens = TokenStore(storage)
    api = ApiClient(
        base_url=api_settings.base_url,
        tokens=tokens,
        timeout_s=api_settings.timeout_s,
        transport=transport,
    )
    router = HistoryRouter(initial_path)
    page = PageEvents()
    coordinator = InactivityLogoutCoordinator(
        storage=storage,
        tokens=tokens,
        api=api,
        router=router,
        page=page,
        bus=build_logout_bus(storage, settings, scheduler, channel_factory),
        scheduler=scheduler,
        settings=settings,
    )
    logger.debug("session runtime ready (redirect_to=%s)", settings.redirect_to)
    return SessionRuntime(
        storage=storage,
        tokens=tokens,
        api=api,
        router=router,
        page=page,
        coordinator=coordinator,
    )


__all__ = ["SessionRuntime", "build_logout_bus", "build_session_runtime"]
