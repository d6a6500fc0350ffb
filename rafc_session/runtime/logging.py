"""Logging initialization."""

from __future__ import annotations

import logging

from rafc_session.config.logging import LOG_LEVEL, LOG_FORMAT, NOISY_LOGGERS, SHOW_HTTP_LOGS


def configure_logging() -> None:
    if not SHOW_HTTP_LOGS:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
