"""
NPC Dialogue Engine

Runtime pieces shared by the dialogue framework: the typed event bus,
the frame-driven scheduler, configuration and NPC data loading.

Quick Start:
    from engine.core import DialogueConfig, EventBus, Scheduler
    from framework.systems import DialogueSystem

    system = DialogueSystem(DialogueConfig(), EventBus(), definitions=npcs)
    system.build()
    system.open_dialogue(1)

    # In game loop:
    system.update(dt)
"""

__version__ = "0.1.0"
__author__ = "Developer"

# Re-export core components for convenience
from engine.core import (
    DialogueConfig,
    EventBus,
    Event,
    DialogueEvent,
    NpcEvent,
    Scheduler,
    ScheduledTask,
)

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
