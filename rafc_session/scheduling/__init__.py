from .base import Timer, Scheduler
from .loop import AsyncioScheduler
from .timer import RepeatingTimer
from .manual import ManualTimer, ManualScheduler

__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "ManualTimer",
    "RepeatingTimer",
    "Scheduler",
    "Timer",
]
