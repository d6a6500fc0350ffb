from __future__ import annotations

from dataclasses import dataclass

from rafc_session.api.tokens import TokenStore
from rafc_session.channels import BroadcastHub, LocalBroadcastChannel, local_channel_factory
from rafc_session.channels.factory import unsupported_channel_factory
from rafc_session.page.events import PageEvents
from rafc_session.scheduling import ManualScheduler
from rafc_session.state.events import StorageEvent
from rafc_session.state.settings import CoordinatorSettings
from rafc_session.state.coordinator import CoordinatorState
from rafc_session.storage import TabStorage, SharedStorage
from rafc_session.runtime.dependencies import build_logout_bus
from rafc_session.session.coordinator import InactivityLogoutCoordinator

SETTINGS = CoordinatorSettings(idle_timeout_s=300.0, poll_interval_s=15.0, activity_debounce_s=1.0)
ACTIVITY_KEY = SETTINGS.activity_key
SIGNAL_KEY = SETTINGS.logout_signal_key


class _FakeApi:
    def __init__(self) -> None:
        self.observers: dict[int, object] = {}
        self._next = 0

    def register_activity_observer(self, observer) -> int:
        self._next += 1
        self.observers[self._next] = observer
        return self._next

    def unregister_activity_observer(self, observer_id: int) -> bool:
        return self.observers.pop(observer_id, None) is not None

    def send(self) -> None:
        for observer in list(self.observers.values()):
            observer(object())


class _FakeRouter:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def navigate_replace(self, path: str) -> bool:
        self.calls.append(path)
        return True


@dataclass
class _Tab:
    storage: TabStorage
    tokens: TokenStore
    api: _FakeApi
    router: _FakeRouter
    page: PageEvents
    coordinator: InactivityLogoutCoordinator


def _make_tab(shared, scheduler, *, hub=None, channel_factory=None, api=None, settings=SETTINGS) -> _Tab:
    storage = TabStorage(shared)
    tokens = TokenStore(storage)
    api = api or _FakeApi()
    router = _FakeRouter()
    page = PageEvents()
    if channel_factory is None and hub is not None:
        channel_factory = local_channel_factory(hub)
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
    return _Tab(storage, tokens, api, router, page, coordinator)


def _watch(shared: SharedStorage, key: str) -> list[StorageEvent]:
    events: list[StorageEvent] = []
    observer = TabStorage(shared)
    observer.add_listener(lambda event: events.append(event) if event.key == key else None)
    return events


def test_idle_timeout_expels_exactly_once() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)
    tab.tokens.set_token("tok")
    tab.coordinator.attach()

    scheduler.advance(299)
    assert tab.router.calls == []
    assert tab.tokens.get_token() == "tok"

    scheduler.advance(1)
    assert tab.router.calls == ["/login"]
    assert tab.tokens.get_token() is None
    assert shared.get(SIGNAL_KEY) is not None

    scheduler.advance(600)
    assert tab.router.calls == ["/login"]


def test_activity_refreshes_the_idle_window() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)
    tab.tokens.set_token("tok")
    tab.coordinator.attach()

    scheduler.advance(299)
    assert tab.coordinator.record_activity_now() is True
    scheduler.advance(299)
    tab.coordinator.check_inactivity()
    assert tab.router.calls == []

    # Next poll tick lands 301s after the last activity.
    scheduler.advance(2)
    assert tab.router.calls == ["/login"]


def test_activity_writes_are_debounced() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    writes = _watch(shared, ACTIVITY_KEY)
    tab = _make_tab(shared, scheduler)
    tab.coordinator.attach()

    assert tab.coordinator.record_activity_now() is True
    scheduler.advance(0.5)
    assert tab.coordinator.record_activity_now() is False
    assert len(writes) == 1

    scheduler.advance(0.6)
    assert tab.coordinator.record_activity_now() is True
    assert len(writes) == 2


def test_debounce_interval_is_configurable() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    settings = CoordinatorSettings(idle_timeout_s=300.0, poll_interval_s=15.0, activity_debounce_s=5.0)
    tab = _make_tab(shared, scheduler, settings=settings)

    assert tab.coordinator.record_activity_now() is True
    scheduler.advance(4)
    assert tab.coordinator.record_activity_now() is False
    scheduler.advance(1)
    assert tab.coordinator.record_activity_now() is True


def test_no_token_makes_the_idle_check_a_noop() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)
    tab.coordinator.attach()

    scheduler.advance(24 * 3600)
    tab.coordinator.check_inactivity()

    assert tab.router.calls == []
    assert shared.get(SIGNAL_KEY) is None
    assert shared.get(ACTIVITY_KEY) is None


def test_logout_signal_from_another_tab_expels_once_without_rebroadcast() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)
    tab.tokens.set_token("tok")
    tab.coordinator.attach()

    other = TabStorage(shared)
    other.remove_item("rafc_token")
    other.set_item(SIGNAL_KEY, "123")

    assert tab.router.calls == ["/login"]
    assert shared.get(SIGNAL_KEY) == "123"

    other.set_item(SIGNAL_KEY, "124")
    assert tab.router.calls == ["/login"]


def test_empty_logout_signal_is_ignored() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)
    tab.tokens.set_token("tok")
    tab.coordinator.attach()

    TabStorage(shared).set_item(SIGNAL_KEY, "")

    assert tab.router.calls == []
    assert tab.tokens.get_token() == "tok"


def test_force_logout_reaches_every_tab_once() -> None:
    shared, scheduler, hub = SharedStorage(), ManualScheduler(), BroadcastHub()
    first = _make_tab(shared, scheduler, hub=hub)
    second = _make_tab(shared, scheduler, hub=hub)
    first.tokens.set_token("tok")
    first.coordinator.attach()
    second.coordinator.attach()

    first.coordinator.force_logout_now()

    # The second tab hears both the storage signal and the channel message.
    assert first.router.calls == ["/login"]
    assert second.router.calls == ["/login"]
    assert shared.get("rafc_token") is None


def test_activity_ping_on_the_channel_marks_activity() -> None:
    shared, scheduler, hub = SharedStorage(), ManualScheduler(), BroadcastHub()
    tab = _make_tab(shared, scheduler, hub=hub)
    tab.coordinator.attach()

    sender = LocalBroadcastChannel(hub, SETTINGS.channel_name)
    sender.post_message("activityPing")

    assert shared.get(ACTIVITY_KEY) == str(scheduler.now_ms())


def test_unsupported_channel_falls_back_to_storage_signal() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    first = _make_tab(shared, scheduler, channel_factory=unsupported_channel_factory)
    second = _make_tab(shared, scheduler, channel_factory=unsupported_channel_factory)
    first.tokens.set_token("tok")
    first.coordinator.attach()
    second.coordinator.attach()

    first.coordinator.force_logout_now()

    assert second.router.calls == ["/login"]


def test_concurrent_logout_triggers_navigate_once() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)
    tab.tokens.set_token("tok")
    tab.coordinator.attach()

    scheduler.advance(290)
    tab.coordinator.force_logout_now()
    tab.coordinator.force_logout_now()
    scheduler.advance(60)

    assert tab.tokens.get_token() is None
    assert tab.router.calls == ["/login"]
    assert tab.coordinator.expelled is True
    assert tab.coordinator.state is CoordinatorState.TRACKING


def test_new_token_rearms_the_logout_path() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)
    tab.tokens.set_token("tok")
    tab.coordinator.attach()
    tab.coordinator.force_logout_now()

    tab.tokens.set_token("tok-2")
    tab.coordinator.record_activity_now()
    scheduler.advance(301)

    assert tab.router.calls == ["/login", "/login"]


def test_other_tabs_follow_every_logout_after_a_relogin() -> None:
    shared, scheduler, hub = SharedStorage(), ManualScheduler(), BroadcastHub()
    first = _make_tab(shared, scheduler, hub=hub)
    second = _make_tab(shared, scheduler, hub=hub)
    first.tokens.set_token("tok")
    first.coordinator.attach()
    second.coordinator.attach()

    first.coordinator.force_logout_now()
    assert second.router.calls == ["/login"]

    second.tokens.set_token("tok-2")
    assert second.coordinator.expelled is False
    first.coordinator.force_logout_now()

    assert first.router.calls == ["/login", "/login"]
    assert second.router.calls == ["/login", "/login"]
    assert second.tokens.get_token() is None


def test_login_in_a_third_tab_rearms_idle_tabs() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    first = _make_tab(shared, scheduler)
    second = _make_tab(shared, scheduler)
    first.tokens.set_token("tok")
    first.coordinator.attach()
    second.coordinator.attach()
    first.coordinator.force_logout_now()
    assert first.coordinator.expelled and second.coordinator.expelled

    TokenStore(TabStorage(shared)).set_token("tok-3")

    assert first.coordinator.expelled is False
    assert second.coordinator.expelled is False
    TabStorage(shared).set_item(SIGNAL_KEY, str(scheduler.now_ms() + 5))
    assert first.router.calls == ["/login", "/login"]
    assert second.router.calls == ["/login", "/login"]


def test_detach_stops_listening_for_token_changes() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)
    tab.tokens.set_token("tok")
    tab.coordinator.attach()
    tab.coordinator.force_logout_now()
    tab.coordinator.detach()

    TokenStore(TabStorage(shared)).set_token("tok-2")
    assert tab.coordinator.expelled is True


def test_detach_leaves_nothing_behind() -> None:
    shared, scheduler, hub = SharedStorage(), ManualScheduler(), BroadcastHub()
    tab = _make_tab(shared, scheduler, hub=hub)
    tab.tokens.set_token("tok")
    tab.coordinator.attach()
    tab.coordinator.detach()

    writes = _watch(shared, ACTIVITY_KEY)
    scheduler.advance(15 * 10)
    for event_type in ("mousemove", "keydown", "click"):
        tab.page.dispatch_event(event_type)
    tab.api.send()
    TabStorage(shared).set_item(SIGNAL_KEY, "999")
    LocalBroadcastChannel(hub, SETTINGS.channel_name).post_message("forceLogout")

    assert writes == []
    assert tab.router.calls == []
    assert scheduler.active_timers == 0
    assert tab.page.listener_count() == 0
    assert tab.api.observers == {}
    assert hub.member_count(SETTINGS.channel_name) == 1
    assert tab.coordinator.state is CoordinatorState.DETACHED


def test_first_check_bootstraps_the_idle_clock() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)
    tab.tokens.set_token("tok")

    tab.coordinator.attach()
    assert shared.get(ACTIVITY_KEY) == str(scheduler.now_ms())

    tab.coordinator.check_inactivity()
    assert tab.router.calls == []


def test_tab_reopened_after_idle_is_expelled_on_attach() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    shared.set(ACTIVITY_KEY, str(scheduler.now_ms() - 400_000))
    tab = _make_tab(shared, scheduler)
    tab.tokens.set_token("tok")

    tab.coordinator.attach()

    assert tab.router.calls == ["/login"]


def test_page_input_and_visibility_count_as_activity() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)
    tab.coordinator.attach()

    tab.page.dispatch_event("scroll")
    assert shared.get(ACTIVITY_KEY) == str(scheduler.now_ms())

    scheduler.advance(5)
    tab.page.set_hidden(True)
    assert shared.get(ACTIVITY_KEY) != str(scheduler.now_ms())

    tab.page.set_hidden(False)
    assert shared.get(ACTIVITY_KEY) == str(scheduler.now_ms())


def test_outgoing_requests_count_as_activity() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)
    tab.tokens.set_token("tok")
    tab.coordinator.attach()

    for _ in range(40):
        scheduler.advance(14)
        tab.api.send()

    assert tab.router.calls == []


def test_attach_is_idempotent_and_detach_without_attach_is_safe() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)

    tab.coordinator.detach()
    tab.coordinator.attach()
    tab.coordinator.attach()

    assert scheduler.active_timers == 1
    assert len(tab.api.observers) == 1
    assert tab.page.listener_count("click") == 1


def test_detaching_one_instance_keeps_the_other_observer() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    api = _FakeApi()
    outer = _make_tab(shared, scheduler, api=api)
    inner = _make_tab(shared, scheduler, api=api)
    outer.coordinator.attach()
    inner.coordinator.attach()

    inner.coordinator.detach()

    assert len(api.observers) == 1
    api.send()
    assert shared.get(ACTIVITY_KEY) == str(scheduler.now_ms())


def test_storage_failures_never_block_the_redirect() -> None:
    scheduler = ManualScheduler()
    tab = _make_tab(SharedStorage(enabled=False), scheduler)

    tab.coordinator.attach()
    tab.coordinator.record_activity_now()
    tab.page.dispatch_event("click")
    tab.coordinator.force_logout_now()
    tab.coordinator.detach()

    assert tab.router.calls == ["/login"]


def test_router_failure_is_absorbed() -> None:
    shared, scheduler = SharedStorage(), ManualScheduler()
    tab = _make_tab(shared, scheduler)

    def _broken(path: str) -> bool:
        raise RuntimeError("router gone")

    tab.router.navigate_replace = _broken
    tab.tokens.set_token("tok")
    tab.coordinator.attach()
    tab.coordinator.force_logout_now()

    assert tab.tokens.get_token() is None
    assert shared.get(SIGNAL_KEY) is not None
