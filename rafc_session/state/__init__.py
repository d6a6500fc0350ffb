from .login import GuardianLogin
from .route import RouteDecision
from .events import StorageEvent
from .runtime import SessionRuntime
from .settings import AppSettings, CoordinatorSettings
from .coordinator import CoordinatorState

__all__ = [
    "AppSettings",
    "CoordinatorSettings",
    "CoordinatorState",
    "GuardianLogin",
    "RouteDecision",
    "SessionRuntime",
    "StorageEvent",
]
