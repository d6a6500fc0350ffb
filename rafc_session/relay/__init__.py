from .hub import ChannelHub
from .limits import RelayFrameBudget
from .handler import handle_relay_connection
from .lifecycle import RelayLifecycle

__all__ = ["ChannelHub", "RelayFrameBudget", "RelayLifecycle", "handle_relay_connection"]
