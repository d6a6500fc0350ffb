"""Coordinator lifecycle states."""

from __future__ import annotations

import enum


class CoordinatorState(str, enum.Enum):
    DETACHED = "detached"
    TRACKING = "tracking"
    EXPELLING = "expelling"


__all__ = ["CoordinatorState"]
