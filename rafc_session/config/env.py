"""Environment parsing helpers shared by the config modules."""

from __future__ import annotations

import os

DISABLED_VALUES = {"0", "none", "null", "disabled", "disable", "off", "false"}


def get_str(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip()
    return raw or default


def get_float(name: str, default: float, *, minimum: float = 0.0) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return float(default)
    try:
        value = float(raw)
    except Exception:
        return float(default)
    if value < minimum:
        return float(default)
    return value


def get_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return int(default)
    try:
        value = int(raw)
    except Exception:
        return int(default)
    return max(minimum, value)


def get_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return bool(default)
    if raw in DISABLED_VALUES:
        return False
    return raw in {"1", "true", "yes", "y", "on"}


__all__ = ["DISABLED_VALUES", "get_bool", "get_float", "get_int", "get_str"]
