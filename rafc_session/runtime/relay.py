"""Relay dependency construction."""

from __future__ import annotations

from rafc_session.relay.hub import ChannelHub
from rafc_session.state.relay import RelayDeps
from rafc_session.state.settings import RelaySettings

from .settings import load_settings


def build_relay_deps(settings: RelaySettings | None = None) -> RelayDeps:
    settings = settings or load_settings().relay
    return RelayDeps(hub=ChannelHub(max_connections=settings.max_connections), settings=settings)


__all__ = ["RelayDeps", "build_relay_deps"]
