"""Runtime package.

Keep this module dependency-light: importing `rafc_session.runtime.*` from
unit tests should not open sockets or touch the network.
"""

__all__: list[str] = []
