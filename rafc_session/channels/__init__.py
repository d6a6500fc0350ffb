from .hub import BroadcastHub
from .base import ChannelFactory, MessageHandler, BroadcastChannel
from .local import LocalBroadcastChannel
from .relay import RelayBroadcastChannel, build_channel_url
from .factory import local_channel_factory, relay_channel_factory, unsupported_channel_factory

__all__ = [
    "BroadcastChannel",
    "BroadcastHub",
    "ChannelFactory",
    "LocalBroadcastChannel",
    "MessageHandler",
    "RelayBroadcastChannel",
    "build_channel_url",
    "local_channel_factory",
    "relay_channel_factory",
    "unsupported_channel_factory",
]
