"""Clocks and timer scheduling."""

from .clock import Clock, SystemClock, ManualClock
from .scheduler import ScheduledTask, Scheduler, ManualScheduler, ThreadingScheduler

__all__ = [
    "Clock",
    "SystemClock",
    "ManualClock",
    "ScheduledTask",
    "Scheduler",
    "ManualScheduler",
    "ThreadingScheduler",
]
