from .guard import check_route_access
from .events import PageEvents
from .router import HistoryEntry, HistoryRouter

__all__ = ["HistoryEntry", "HistoryRouter", "PageEvents", "check_route_access"]
