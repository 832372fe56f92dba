"""
World module - NPC definitions, placement and presentation.

Provides:
- NPC definition models and validation
- Roster of placed NPCs with duplicate-location detection
- Presenter interface to the host engine
"""

from framework.world.npc import (
    Blip,
    Coords,
    DialogueAnimation,
    NpcDefinition,
    NpcIdAllocator,
    NpcRoster,
    parse_definition,
)
from framework.world.presenter import InteractionPrompt, LoggingPresenter, NullPresenter, Presenter

__all__ = [
    # NPC
    "Blip",
    "Coords",
    "DialogueAnimation",
    "NpcDefinition",
    "NpcIdAllocator",
    "NpcRoster",
    "parse_definition",
    # Presentation
    "InteractionPrompt",
    "Presenter",
    "NullPresenter",
    "LoggingPresenter",
]
