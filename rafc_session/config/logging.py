"""Logging configuration (env-resolved constants only)."""

from __future__ import annotations

from .env import get_str, get_bool

LOG_LEVEL: str = get_str("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# httpx logs every request at INFO; keep it quiet unless asked for.
SHOW_HTTP_LOGS: bool = get_bool("SHOW_HTTP_LOGS", False)
NOISY_LOGGERS = ("httpx", "httpcore", "websockets")

__all__ = ["LOG_FORMAT", "LOG_LEVEL", "NOISY_LOGGERS", "SHOW_HTTP_LOGS"]
