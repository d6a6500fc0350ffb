"""Inactivity logout settings (env-resolved constants only)."""

from __future__ import annotations

from .env import get_float

# Storage keys shared by every tab of the console.
ACTIVITY_KEY = "rafc_lastActivity"
LOGOUT_SIGNAL_KEY = "rafc_forceLogout"

# The guardian portal keeps its own idle clock so an admin tab never expels a parent.
GUARDIAN_KEY_SUFFIX = "_apoderado"

CHANNEL_NAME = "rafc_bc"

# Broadcast channel message bodies.
MSG_FORCE_LOGOUT = "forceLogout"
MSG_ACTIVITY_PING = "activityPing"

# Page events treated as user activity.
ACTIVITY_EVENTS = ("mousemove", "mousedown", "keydown", "scroll", "touchstart", "click")
VISIBILITY_EVENT = "visibilitychange"

ADMIN_LOGIN_PATH = "/login"
GUARDIAN_LOGIN_PATH = "/login-apoderado"
ADMIN_HOME_PATH = "/admin"
GUARDIAN_HOME_PATH = "/portal-apoderado"
GUARDIAN_CHANGE_PASSWORD_PATH = "/portal-apoderado/cambiar-clave"

IDLE_TIMEOUT_S: float = get_float("RAFC_IDLE_TIMEOUT_S", 5 * 60.0, minimum=1.0)
GUARDIAN_IDLE_TIMEOUT_S: float = get_float("RAFC_GUARDIAN_IDLE_TIMEOUT_S", 15 * 60.0, minimum=1.0)
POLL_INTERVAL_S: float = get_float("RAFC_POLL_INTERVAL_S", 15.0, minimum=0.01)

# Activity writes closer together than this are dropped.
ACTIVITY_DEBOUNCE_S: float = get_float("RAFC_ACTIVITY_DEBOUNCE_S", 1.0)

__all__ = [
    "ACTIVITY_DEBOUNCE_S",
    "ACTIVITY_EVENTS",
    "ACTIVITY_KEY",
    "ADMIN_HOME_PATH",
    "ADMIN_LOGIN_PATH",
    "CHANNEL_NAME",
    "GUARDIAN_CHANGE_PASSWORD_PATH",
    "GUARDIAN_HOME_PATH",
    "GUARDIAN_IDLE_TIMEOUT_S",
    "GUARDIAN_KEY_SUFFIX",
    "GUARDIAN_LOGIN_PATH",
    "IDLE_TIMEOUT_S",
    "LOGOUT_SIGNAL_KEY",
    "MSG_ACTIVITY_PING",
    "MSG_FORCE_LOGOUT",
    "POLL_INTERVAL_S",
    "VISIBILITY_EVENT",
]
