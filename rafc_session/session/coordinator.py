"""Inactivity logout coordinator (idle expulsion synchronized across tabs)."""

from __future__ import annotations

import logging

from rafc_session.bus.bus import LogoutBus
from rafc_session.api.tokens import TokenStore
from rafc_session.page.events import PageEvents
from rafc_session.page.router import HistoryRouter
from rafc_session.storage.tab import TabStorage
from rafc_session.scheduling.base import Timer, Scheduler
from rafc_session.state.settings import CoordinatorSettings
from rafc_session.state.coordinator import CoordinatorState
from rafc_session.config.session import ACTIVITY_EVENTS, VISIBILITY_EVENT

from .base import ActivityObserverHost

logger = logging.getLogger(__name__)


class InactivityLogoutCoordinator:
    """Expels the user after `idle_timeout_s` without activity, or as soon as
    any tab asks for a logout.

    Activity is page input, the page becoming visible again, or an outgoing
    API request. The last activity time lives in shared storage so every tab
    shares one idle clock. Nothing here raises to the caller: storage,
    channel, router and token failures only degrade the feature.
    """

    def __init__(
        self,
        *,
        storage: TabStorage,
        tokens: TokenStore,
        api: ActivityObserverHost,
        router: HistoryRouter,
        page: PageEvents,
        bus: LogoutBus,
        scheduler: Scheduler,
        settings: CoordinatorSettings | None = None,
    ) -> None:
        self._storage = storage
        self._tokens = tokens
        self._api = api
        self._router = router
        self._page = page
        self._bus = bus
        self._scheduler = scheduler
        self._settings = settings or CoordinatorSettings()
        self._debounce_ms = int(self._settings.activity_debounce_s * 1000)
        self._timeout_ms = int(self._settings.idle_timeout_s * 1000)

        self._state = CoordinatorState.DETACHED
        self._timer: Timer | None = None
        self._observer_id: int | None = None
        self._last_write_ms: int | None = None
        self._expelled = False

    @property
    def settings(self) -> CoordinatorSettings:
        return self._settings

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def attached(self) -> bool:
        return self._state is not CoordinatorState.DETACHED

    @property
    def expelled(self) -> bool:
        return self._expelled

    # Lifecycle

    def attach(self) -> None:
        if self.attached:
            return
        self._state = CoordinatorState.TRACKING

        self._tokens.add_listener(self._on_token_change)
        self._register_observer()
        for event_type in ACTIVITY_EVENTS:
            self._page.add_event_listener(event_type, self._on_page_activity)
        self._page.add_event_listener(VISIBILITY_EVENT, self._on_visibility)
        self._bus.open(self._on_remote_logout, self._on_remote_activity)

        try:
            self._timer = self._scheduler.call_every(self._settings.poll_interval_s, self._on_tick)
        except Exception:
            logger.warning("idle check timer could not be started", exc_info=True)

        # A tab reopened after sitting idle is expelled right away.
        self.check_inactivity()

    def detach(self) -> None:
        if not self.attached:
            return
        self._state = CoordinatorState.DETACHED

        timer, self._timer = self._timer, None
        if timer is not None:
            try:
                timer.cancel()
            except Exception:
                logger.debug("idle timer cancel failed", exc_info=True)

        self._unregister_observer()
        self._tokens.remove_listener(self._on_token_change)
        for event_type in ACTIVITY_EVENTS:
            self._page.remove_event_listener(event_type, self._on_page_activity)
        self._page.remove_event_listener(VISIBILITY_EVENT, self._on_visibility)
        self._bus.close()

    # Manual hooks for the host view

    def record_activity_now(self) -> bool:
        return self._mark_activity()

    def force_logout_now(self) -> None:
        self._logout(announce=True, reason="requested")

    # Idle check

    def check_inactivity(self) -> None:
        if not self._has_token():
            return
        self._expelled = False

        last = self._read_last_activity()
        now = self._scheduler.now_ms()
        if not last:
            # First check on a fresh storage starts the idle clock.
            self._mark_activity(now)
            return

        if now - last >= self._timeout_ms:
            self._logout(announce=True, reason="idle")

    def _on_tick(self) -> None:
        if self.attached:
            self.check_inactivity()

    # Activity

    def _mark_activity(self, ts: int | None = None) -> bool:
        ts = self._scheduler.now_ms() if ts is None else ts
        if self._last_write_ms is not None and ts - self._last_write_ms < self._debounce_ms:
            return False
        self._last_write_ms = ts
        try:
            self._storage.set_item(self._settings.activity_key, str(ts))
        except Exception:
            logger.debug("activity write failed", exc_info=True)
            return False
        return True

    def _read_last_activity(self) -> int:
        try:
            raw = self._storage.get_item(self._settings.activity_key)
        except Exception:
            logger.debug("activity read failed", exc_info=True)
            return 0
        try:
            return int(raw or "0")
        except ValueError:
            return 0

    def _on_page_activity(self, _event_type: str) -> None:
        if self.attached:
            self._mark_activity()

    def _on_visibility(self, _event_type: str) -> None:
        if self.attached and not self._page.hidden:
            self._mark_activity()

    def _on_request(self, _request: object) -> None:
        if self.attached:
            self._mark_activity()

    def _on_remote_activity(self) -> None:
        if self.attached:
            self._mark_activity()

    def _on_token_change(self, token: str | None) -> None:
        # A fresh login in any tab starts a new session that can be expelled again.
        if token:
            self._expelled = False

    def _on_remote_logout(self) -> None:
        # The announcing tab already told everyone; echoing it back would loop.
        if self.attached:
            self._logout(announce=False, reason="remote")

    # Logout path

    def _logout(self, *, announce: bool, reason: str) -> None:
        if self._expelled and not self._has_token():
            return
        self._expelled = True
        previous = self._state
        self._state = CoordinatorState.EXPELLING
        logger.info("expelling session (%s); redirecting to %s", reason, self._settings.redirect_to)
        try:
            try:
                self._tokens.clear_token()
            except Exception:
                logger.debug("token clear failed", exc_info=True)

            if announce:
                self._bus.announce_logout()

            try:
                self._router.navigate_replace(self._settings.redirect_to)
            except Exception:
                logger.warning("redirect to %s failed", self._settings.redirect_to, exc_info=True)
        finally:
            # detach() may have run from inside a listener during the logout.
            if self._state is CoordinatorState.EXPELLING:
                self._state = (
                    CoordinatorState.DETACHED if previous is CoordinatorState.DETACHED else CoordinatorState.TRACKING
                )

    def _has_token(self) -> bool:
        try:
            return bool(self._tokens.get_token())
        except Exception:
            logger.debug("token lookup failed", exc_info=True)
            return False

    # Request observer

    def _register_observer(self) -> None:
        try:
            self._observer_id = self._api.register_activity_observer(self._on_request)
        except Exception:
            logger.debug("request observer registration failed", exc_info=True)
            self._observer_id = None

    def _unregister_observer(self) -> None:
        observer_id, self._observer_id = self._observer_id, None
        if observer_id is None:
            return
        try:
            self._api.unregister_activity_observer(observer_id)
        except Exception:
            logger.debug("request observer removal failed", exc_info=True)


__all__ = ["InactivityLogoutCoordinator"]
