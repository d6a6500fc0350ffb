"""Broadcast relay protocol configuration and constants."""

from __future__ import annotations

from .env import get_str, get_int, get_float

RELAY_ENDPOINT_PATH = "/bc/{channel}"
RELAY_URL: str = get_str("RAFC_RELAY_URL", "ws://127.0.0.1:8100")

# Frame keys
RELAY_KEY_TYPE = "type"
RELAY_KEY_CHANNEL = "channel"
RELAY_KEY_DATA = "data"
RELAY_KEY_PAYLOAD = "payload"

RELAY_TYPE_MESSAGE = "message"
RELAY_TYPE_ERROR = "error"

# Close codes
RELAY_CLOSE_IDLE_CODE = 4000
RELAY_CLOSE_UNAUTHORIZED_CODE = 4001
RELAY_CLOSE_BUSY_CODE = 4002

RELAY_CLOSE_IDLE_REASON = "idle timeout"

# Errors (payload.code values)
RELAY_ERROR_AUTH_FAILED = "authentication_failed"
RELAY_ERROR_SERVER_AT_CAPACITY = "server_at_capacity"
RELAY_ERROR_INVALID_MESSAGE = "invalid_message"
RELAY_ERROR_RATE_LIMITED = "rate_limited"

RELAY_MAX_CONNECTIONS: int = get_int("RAFC_RELAY_MAX_CONNECTIONS", 500, minimum=1)

# Idle watchdog; 0 disables the idle close.
RELAY_IDLE_TIMEOUT_S: float = get_float("RAFC_RELAY_IDLE_TIMEOUT_S", 30 * 60.0)
RELAY_WATCHDOG_TICK_S: float = get_float("RAFC_RELAY_WATCHDOG_TICK_S", 5.0, minimum=0.01)

RELAY_MESSAGE_WINDOW_SECONDS: float = get_float("RAFC_RELAY_MESSAGE_WINDOW_SECONDS", 60.0, minimum=0.01)
RELAY_MAX_MESSAGES_PER_WINDOW: int = get_int("RAFC_RELAY_MAX_MESSAGES_PER_WINDOW", 600, minimum=1)

# Frames a relay channel client keeps while disconnected; the oldest go first.
RELAY_CLIENT_MAX_PENDING: int = get_int("RAFC_RELAY_CLIENT_MAX_PENDING", 64, minimum=1)

__all__ = [
    "RELAY_CLIENT_MAX_PENDING",
    "RELAY_CLOSE_BUSY_CODE",
    "RELAY_CLOSE_IDLE_CODE",
    "RELAY_CLOSE_IDLE_REASON",
    "RELAY_CLOSE_UNAUTHORIZED_CODE",
    "RELAY_ENDPOINT_PATH",
    "RELAY_ERROR_AUTH_FAILED",
    "RELAY_ERROR_INVALID_MESSAGE",
    "RELAY_ERROR_RATE_LIMITED",
    "RELAY_ERROR_SERVER_AT_CAPACITY",
    "RELAY_IDLE_TIMEOUT_S",
    "RELAY_KEY_CHANNEL",
    "RELAY_KEY_DATA",
    "RELAY_KEY_PAYLOAD",
    "RELAY_KEY_TYPE",
    "RELAY_MAX_CONNECTIONS",
    "RELAY_MAX_MESSAGES_PER_WINDOW",
    "RELAY_MESSAGE_WINDOW_SECONDS",
    "RELAY_TYPE_ERROR",
    "RELAY_TYPE_MESSAGE",
    "RELAY_URL",
    "RELAY_WATCHDOG_TICK_S",
]
