"""Load runtime settings.

Configuration values are resolved from the environment in
`rafc_session/config/*` and exposed here as structured dataclasses.
"""

from __future__ import annotations

from typing import Literal

from rafc_session.api.base_url import pick_base_url
from rafc_session.config.secrets import get_relay_api_key
from rafc_session.config.api import APP_ENV, API_TIMEOUT_S, API_BASE_URL_RAW
from rafc_session.state.settings import ApiSettings, AppSettings, RelaySettings, CoordinatorSettings
from rafc_session.config.session import (
    ACTIVITY_KEY,
    CHANNEL_NAME,
    IDLE_TIMEOUT_S,
    POLL_INTERVAL_S,
    ADMIN_LOGIN_PATH,
    LOGOUT_SIGNAL_KEY,
    ACTIVITY_DEBOUNCE_S,
    GUARDIAN_KEY_SUFFIX,
    GUARDIAN_LOGIN_PATH,
    GUARDIAN_IDLE_TIMEOUT_S,
)
from rafc_session.config.relay import (
    RELAY_URL,
    RELAY_IDLE_TIMEOUT_S,
    RELAY_MAX_CONNECTIONS,
    RELAY_WATCHDOG_TICK_S,
    RELAY_MESSAGE_WINDOW_SECONDS,
    RELAY_MAX_MESSAGES_PER_WINDOW,
)

Profile = Literal["admin", "guardian"]


def load_coordinator_settings(profile: Profile = "admin") -> CoordinatorSettings:
    if profile == "guardian":
        return CoordinatorSettings(
            idle_timeout_s=GUARDIAN_IDLE_TIMEOUT_S,
            poll_interval_s=POLL_INTERVAL_S,
            activity_key=ACTIVITY_KEY + GUARDIAN_KEY_SUFFIX,
            logout_signal_key=LOGOUT_SIGNAL_KEY + GUARDIAN_KEY_SUFFIX,
            redirect_to=GUARDIAN_LOGIN_PATH,
            channel_name=CHANNEL_NAME,
            activity_debounce_s=ACTIVITY_DEBOUNCE_S,
        )
    if profile != "admin":
        raise ValueError(f"unknown session profile: {profile!r}")
    return CoordinatorSettings(
        idle_timeout_s=IDLE_TIMEOUT_S,
        poll_interval_s=POLL_INTERVAL_S,
        activity_key=ACTIVITY_KEY,
        logout_signal_key=LOGOUT_SIGNAL_KEY,
        redirect_to=ADMIN_LOGIN_PATH,
        channel_name=CHANNEL_NAME,
        activity_debounce_s=ACTIVITY_DEBOUNCE_S,
    )


def load_settings() -> AppSettings:
    production = APP_ENV in {"prod", "production"}
    return AppSettings(
        admin=load_coordinator_settings("admin"),
        guardian=load_coordinator_settings("guardian"),
        api=ApiSettings(
            base_url=pick_base_url(API_BASE_URL_RAW, production=production),
            timeout_s=API_TIMEOUT_S,
            production=production,
        ),
        relay=RelaySettings(
            url=RELAY_URL,
            api_key=get_relay_api_key(),
            max_connections=RELAY_MAX_CONNECTIONS,
            idle_timeout_s=RELAY_IDLE_TIMEOUT_S,
            watchdog_tick_s=RELAY_WATCHDOG_TICK_S,
            message_window_seconds=RELAY_MESSAGE_WINDOW_SECONDS,
            max_messages_per_window=RELAY_MAX_MESSAGES_PER_WINDOW,
        ),
    )


__all__ = ["Profile", "load_coordinator_settings", "load_settings"]
