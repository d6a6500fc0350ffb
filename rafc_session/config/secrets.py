"""Secrets and authentication configuration."""

from __future__ import annotations

import os


def get_relay_api_key() -> str:
    return (os.getenv("RAFC_RELAY_API_KEY") or "").strip()


__all__ = ["get_relay_api_key"]
