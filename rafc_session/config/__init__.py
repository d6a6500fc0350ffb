"""Configuration module exports (env-resolved constants only)."""

from .session import (
    IDLE_TIMEOUT_S,
    POLL_INTERVAL_S,
    ACTIVITY_DEBOUNCE_S,
)

__all__ = [
    "ACTIVITY_DEBOUNCE_S",
    "IDLE_TIMEOUT_S",
    "POLL_INTERVAL_S",
]
