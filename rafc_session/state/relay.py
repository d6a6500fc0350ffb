"""Typed relay state for dependency wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rafc_session.relay.hub import ChannelHub
    from rafc_session.state.settings import RelaySettings


@dataclass(slots=True)
class RelayDeps:
    hub: ChannelHub
    settings: RelaySettings


__all__ = ["RelayDeps"]
