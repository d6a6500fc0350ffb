"""Login outcomes (dataclasses only)."""

from __future__ import annotations

from typing import Any
from dataclasses import field, dataclass


@dataclass(frozen=True, slots=True)
class GuardianLogin:
    """A successful guardian login.

    `next_path` is where the portal goes next: the forced password change
    when the API flags it, otherwise the page the guardian asked for.
    """

    token: str
    must_change_password: bool
    next_path: str
    data: dict[str, Any] = field(default_factory=dict)


__all__ = ["GuardianLogin"]
