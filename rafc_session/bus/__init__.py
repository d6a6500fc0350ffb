from .base import Signal, LogoutTransport
from .bus import LogoutBus
from .channel import ChannelTransport
from .storage import StorageTransport

__all__ = ["ChannelTransport", "LogoutBus", "LogoutTransport", "Signal", "StorageTransport"]
