"""
Presentation collaborator interface.

The dialogue framework never talks to a game engine directly. A host
integration subclasses Presenter to spawn NPC entities, drive the camera,
play animations and mount the dialogue UI.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from framework.world.npc import DialogueAnimation, NpcDefinition


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InteractionPrompt:
    """
    How the player is offered a conversation with a spawned NPC.

    Attributes:
        method: "target" (targeting-eye option) or "textui" (key prompt)
        distance: Reach in world units
        icon: Icon shown next to the target option
        label: Text of the target option or prompt
    """
    method: str = "target"
    distance: float = 1.5
    icon: str = "fas fa-comments"
    label: str = "Talk"


class Presenter(ABC):
    """
    Host-side calls made by the DialogueSystem.

    All methods are presentation-only: they must not call back into the
    dialogue system synchronously.
    """

    @abstractmethod
    def lookup_entity(self, npc_id: int) -> Optional[Any]:
        """Return the host entity handle for an NPC, or None if it is gone."""
        pass

    @abstractmethod
    def spawn(self, npc_id: int, definition: NpcDefinition, prompt: InteractionPrompt) -> None:
        """Create the NPC entity (model, placement, idle scenario, blip) and its talk prompt."""
        pass

    @abstractmethod
    def despawn(self, npc_id: int) -> None:
        """Remove the NPC entity and its blip."""
        pass

    @abstractmethod
    def show_node(
        self,
        npc_name: str,
        text: str,
        choices: list[str],
        opening: bool = False,
        typewriter_speed: int = 30,
    ) -> None:
        """Display the NPC's line and the choice labels, in order."""
        pass

    @abstractmethod
    def hide_dialogue(self) -> None:
        pass

    def engage_camera(
        self,
        npc_id: int,
        offset: tuple[float, float, float] = (0.0, 1.75, 0.0),
        fov: float = 45.0,
    ) -> None:
        """Frame the NPC. offset is relative to the NPC, fov in degrees."""
        pass

    def disengage_camera(self) -> None:
        pass

    def play_animation(self, npc_id: int, animation: Optional[DialogueAnimation]) -> None:
        pass

    def restore_default_animation(self, npc_id: int, scenario: Optional[str]) -> None:
        pass

    def set_player_visible(self, visible: bool) -> None:
        pass


class NullPresenter(Presenter):
    """Headless presenter: every NPC 'exists', nothing is drawn."""

    def __init__(self):
        self._entities: set[int] = set()

    def lookup_entity(self, npc_id: int) -> Optional[int]:
        return npc_id if npc_id in self._entities else None

    def spawn(self, npc_id: int, definition: NpcDefinition, prompt: InteractionPrompt) -> None:
        self._entities.add(npc_id)

    def despawn(self, npc_id: int) -> None:
        self._entities.discard(npc_id)

    def show_node(self, npc_name, text, choices, opening=False, typewriter_speed=30) -> None:
        pass

    def hide_dialogue(self) -> None:
        pass


class LoggingPresenter(NullPresenter):
    """Headless presenter that logs every call. Used by the demo."""

    def spawn(self, npc_id: int, definition: NpcDefinition, prompt: InteractionPrompt) -> None:
        super().spawn(npc_id, definition, prompt)
        c = definition.coords
        logger.info("Spawned NPC #%d: %s at %.1f, %.1f, %.1f", npc_id, definition.name, c.x, c.y, c.z)
        logger.info("  \"%s\" via %s within %.1f", prompt.label, prompt.method, prompt.distance)

    def despawn(self, npc_id: int) -> None:
        super().despawn(npc_id)
        logger.info("Despawned NPC #%d", npc_id)

    def show_node(self, npc_name, text, choices, opening=False, typewriter_speed=30) -> None:
        logger.info("%s: %s", npc_name, text)
        for i, label in enumerate(choices):
            logger.info("  [%d] %s", i, label)

    def hide_dialogue(self) -> None:
        logger.info("Dialogue hidden")

    def engage_camera(self, npc_id, offset=(0.0, 1.75, 0.0), fov=45.0) -> None:
        logger.info("Camera on NPC #%d (offset %s, fov %.0f)", npc_id, offset, fov)

    def disengage_camera(self) -> None:
        logger.info("Camera released")

    def play_animation(self, npc_id, animation) -> None:
        if animation is not None:
            logger.info("NPC #%d plays %s / %s", npc_id, animation.dictionary, animation.anim)

    def restore_default_animation(self, npc_id, scenario) -> None:
        logger.info("NPC #%d back to %s", npc_id, scenario or "idle")

    def set_player_visible(self, visible: bool) -> None:
        logger.info("Player %s", "shown" if visible else "hidden")
