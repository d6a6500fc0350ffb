"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass

from rafc_session.config.session import (
    ACTIVITY_KEY,
    CHANNEL_NAME,
    IDLE_TIMEOUT_S,
    POLL_INTERVAL_S,
    ADMIN_LOGIN_PATH,
    LOGOUT_SIGNAL_KEY,
    ACTIVITY_DEBOUNCE_S,
)


@dataclass(frozen=True, slots=True)
class CoordinatorSettings:
    idle_timeout_s: float = IDLE_TIMEOUT_S
    poll_interval_s: float = POLL_INTERVAL_S
    activity_key: str = ACTIVITY_KEY
    logout_signal_key: str = LOGOUT_SIGNAL_KEY
    redirect_to: str = ADMIN_LOGIN_PATH
    channel_name: str = CHANNEL_NAME
    activity_debounce_s: float = ACTIVITY_DEBOUNCE_S


@dataclass(frozen=True, slots=True)
class ApiSettings:
    base_url: str
    timeout_s: float
    production: bool


@dataclass(frozen=True, slots=True)
class RelaySettings:
    url: str
    api_key: str
    max_connections: int
    idle_timeout_s: float
    watchdog_tick_s: float
    message_window_seconds: float
    max_messages_per_window: int


@dataclass(frozen=True, slots=True)
class AppSettings:
    admin: CoordinatorSettings
    guardian: CoordinatorSettings
    api: ApiSettings
    relay: RelaySettings


__all__ = [
    "ApiSettings",
    "AppSettings",
    "CoordinatorSettings",
    "RelaySettings",
]
