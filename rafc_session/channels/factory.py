"""Channel factories handed to the logout bus."""

from __future__ import annotations

from rafc_session.errors import ChannelUnsupportedError

from .hub import BroadcastHub
from .base import ChannelFactory, BroadcastChannel
from .local import LocalBroadcastChannel
from .relay import ConnectFn, RelayBroadcastChannel


def local_channel_factory(hub: BroadcastHub) -> ChannelFactory:
    def _open(name: str) -> BroadcastChannel:
        return LocalBroadcastChannel(hub, name)

    return _open


def relay_channel_factory(url: str, *, api_key: str = "", connect_fn: ConnectFn | None = None) -> ChannelFactory:
    def _open(name: str) -> BroadcastChannel:
        return RelayBroadcastChannel(name, url=url, api_key=api_key, connect_fn=connect_fn)

    return _open


def unsupported_channel_factory(name: str) -> BroadcastChannel:
    raise ChannelUnsupportedError(name=name, reason="broadcast channels disabled")


__all__ = ["local_channel_factory", "relay_channel_factory", "unsupported_channel_factory"]
