from .coordinator import InactivityLogoutCoordinator

__all__ = ["InactivityLogoutCoordinator"]
