from __future__ import annotations

import httpx
import pytest

from rafc_session.channels import BroadcastHub, local_channel_factory
from rafc_session.bus import ChannelTransport, StorageTransport
from rafc_session.scheduling import ManualScheduler
from rafc_session.state.settings import ApiSettings, CoordinatorSettings
from rafc_session.storage import TabStorage, SharedStorage
from rafc_session.runtime.dependencies import build_logout_bus, build_session_runtime

API = ApiSettings(base_url="http://api.test", timeout_s=5.0, production=False)


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"ok": True})


def test_bus_without_channel_factory_uses_storage_only() -> None:
    storage = TabStorage(SharedStorage())
    bus = build_logout_bus(storage, CoordinatorSettings(), ManualScheduler())
    assert [type(t) for t in bus.transports] == [StorageTransport]


def test_bus_with_channel_factory_adds_channel_transport() -> None:
    storage = TabStorage(SharedStorage())
    bus = build_logout_bus(storage, CoordinatorSettings(), ManualScheduler(), local_channel_factory(BroadcastHub()))
    assert [type(t) for t in bus.transports] == [StorageTransport, ChannelTransport]


@pytest.mark.asyncio
async def test_wired_tabs_share_one_logout() -> None:
    shared = SharedStorage()
    scheduler = ManualScheduler()
    factory = local_channel_factory(BroadcastHub())
    first = build_session_runtime(
        shared, scheduler=scheduler, api_settings=API, channel_factory=factory, initial_path="/admin", transport=httpx.MockTransport(_ok)
    )
    second = build_session_runtime(
        shared, scheduler=scheduler, api_settings=API, channel_factory=factory, initial_path="/admin", transport=httpx.MockTransport(_ok)
    )
    first.tokens.set_token("tok")
    first.coordinator.attach()
    second.coordinator.attach()

    first.coordinator.force_logout_now()

    assert first.tokens.get_token() is None
    assert first.router.current == "/login"
    assert second.router.current == "/login"
    assert second.router.history.count("/login") == 1

    await first.shutdown()
    await second.shutdown()
    assert scheduler.active_timers == 0


@pytest.mark.asyncio
async def test_wired_api_requests_refresh_the_idle_clock() -> None:
    shared = SharedStorage()
    scheduler = ManualScheduler()
    runtime = build_session_runtime(shared, scheduler=scheduler, api_settings=API, transport=httpx.MockTransport(_ok))
    runtime.tokens.set_token("tok")
    runtime.coordinator.attach()
    key = runtime.coordinator.settings.activity_key
    started = int(runtime.storage.get_item(key))

    scheduler.advance(60)
    await runtime.api.get("/jugadores")

    assert int(runtime.storage.get_item(key)) == started + 60_000
    await runtime.shutdown()
    assert not runtime.coordinator.attached
