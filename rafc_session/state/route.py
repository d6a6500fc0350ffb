"""Route guard outcomes (dataclasses only)."""

from __future__ import annotations

from typing import Literal
from dataclasses import dataclass

RouteAction = Literal["allow", "login", "redirect"]


@dataclass(frozen=True, slots=True)
class RouteDecision:
    action: RouteAction
    path: str | None = None
    from_path: str | None = None
    role: int | None = None

    @property
    def allowed(self) -> bool:
        return self.action == "allow"


__all__ = ["RouteAction", "RouteDecision"]
