"""Core framework components for BUG DEFENSE."""

from .state import Phase, EndReason, SessionStateMachine
from .events import EventBus, Event, EventType
from .clock import Clock, ManualClock, MonotonicClock

__all__ = [
    "Phase",
    "EndReason",
    "SessionStateMachine",
    "EventBus",
    "Event",
    "EventType",
    "Clock",
    "ManualClock",
    "MonotonicClock",
]
