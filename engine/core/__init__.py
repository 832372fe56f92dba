"""
Core engine module.

Exports:
- DialogueConfig: Runtime settings
- EventBus, Event, DialogueEvent, NpcEvent: Event system
- Scheduler, ScheduledTask: Delayed one-shot callbacks
"""

from engine.core.config import DialogueConfig
from engine.core.events import EventBus, Event, DialogueEvent, NpcEvent
from engine.core.scheduler import Scheduler, ScheduledTask

__all__ = [
    # Config
    "DialogueConfig",
    # Events
    "EventBus",
    "Event",
    "DialogueEvent",
    "NpcEvent",
    # Scheduling
    "Scheduler",
    "ScheduledTask",
]
