"""
Dialogue system - the public surface of the NPC dialogue framework.

Connects the Navigator to the host: applies the effects it returns to a
Presenter, publishes the outward event surface on the EventBus, hands
terminal actions to the ActionDispatcher, and manages NPC creation and
removal.

Failures are caught here, logged, and reported through the return
value. From the player's side a failed open simply shows nothing and a
failed choice leaves the current node on screen.

Usage:
    system = DialogueSystem(config, event_bus, presenter, definitions=npcs)
    system.build()

    system.open_dialogue(1)
    system.submit_choice(0)

    # In game loop:
    system.update(dt)
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from engine.core.config import DialogueConfig
from engine.core.events import DialogueEvent, EventBus, NpcEvent
from engine.core.scheduler import Scheduler
from framework.dialog.catalog import DialogueCatalog, resolve_entry
from framework.dialog.dispatcher import ActionDispatcher, ActionHandler, RemoteTransport
from framework.dialog.effects import (
    Dispatch,
    DisengageCamera,
    Effect,
    EngageCamera,
    HideDialogue,
    PlayAnimation,
    RestoreAnimation,
    SetPlayerVisible,
    ShowNode,
)
from framework.dialog.errors import DialogueError, InvalidConfig
from framework.dialog.models import DispatchAction
from framework.dialog.navigator import Navigator
from framework.world.npc import NpcDefinition, NpcIdAllocator, NpcRoster, parse_definition
from framework.world.presenter import InteractionPrompt, NullPresenter, Presenter


logger = logging.getLogger(__name__)


class DialogueSystem:
    """
    Owns the catalog, navigator, dispatcher and NPC roster.

    Responsibilities:
    - Build the catalog and spawn configured NPCs once
    - Open/advance/close dialogues
    - Apply navigator effects to the presenter
    - Publish NODE_CHANGED / ACTION_REQUESTED and lifecycle events
    - Create and remove NPCs at runtime
    """

    def __init__(
        self,
        config: Optional[DialogueConfig] = None,
        event_bus: Optional[EventBus] = None,
        presenter: Optional[Presenter] = None,
        definitions: Optional[Mapping[int, Any]] = None,
        scheduler: Optional[Scheduler] = None,
        remote: Optional[RemoteTransport] = None,
        command_executor: Optional[ActionHandler] = None,
    ):
        self.config = config or DialogueConfig()
        self.event_bus = event_bus or EventBus()
        self.presenter = presenter or NullPresenter()
        self.scheduler = scheduler or Scheduler()

        self.roster = NpcRoster(self.config.duplicate_location_threshold)
        self._static = self._parse_static(definitions or {})
        # Runtime ids stay above every configured id
        self._ids = NpcIdAllocator(max([self.config.dynamic_id_start, *self._static]))
        self._prompt = InteractionPrompt(
            method=self.config.interaction_method,
            distance=self.config.interact_distance,
            icon=self.config.target_icon,
            label=self.config.target_label,
        )

        self.catalog = DialogueCatalog(self._static, self.config.strict_references)
        self.navigator = Navigator(self.catalog, enable_camera=self.config.enable_camera)
        self.dispatcher = ActionDispatcher(
            self.scheduler,
            self.event_bus,
            delay=self.config.action_delay,
            remote=remote,
            command_executor=command_executor,
        )

        self._built = False

    # Setup

    def _parse_static(self, definitions: Mapping[int, Any]) -> dict[int, NpcDefinition]:
        parsed: dict[int, NpcDefinition] = {}
        for npc_id, raw in definitions.items():
            try:
                parsed[int(npc_id)] = parse_definition(raw, require_start=False)
            except (InvalidConfig, ValueError) as e:
                logger.error("Skipping configured NPC #%s: %s", npc_id, e)
        return parsed

    def build(self) -> None:
        """Resolve dialogue and spawn every configured NPC. Runs once."""
        if self._built:
            return

        self.catalog.build()
        for npc_id, definition in self._static.items():
            self._place(npc_id, definition)

        self._built = True
        logger.info("Dialogue system ready: %d NPCs", len(self.roster))

    def _place(self, npc_id: int, definition: NpcDefinition) -> None:
        occupant = self.roster.find_at(definition.coords)
        if occupant is not None:
            logger.debug("Replacing NPC #%d at duplicate location", occupant)
            self.remove_npc(occupant)

        self.roster.add(npc_id, definition)
        self.presenter.spawn(npc_id, definition, self._prompt)
        logger.debug("Spawned NPC #%d: %s", npc_id, definition.name)

    # Dialogue flow

    @property
    def is_dialogue_open(self) -> bool:
        return self.navigator.is_open

    @property
    def active_npc_id(self) -> Optional[int]:
        session = self.navigator.session
        return session.npc_id if session else None

    def open_dialogue(self, npc_id: int) -> bool:
        """
        Open a dialogue with an NPC.

        Returns:
            True if a dialogue was opened. False if one is already open
            or the NPC cannot talk.
        """
        if self.navigator.is_open:
            logger.debug("Dialogue already open, ignoring NPC #%d", npc_id)
            return False

        try:
            effects = self.navigator.open(npc_id)
        except DialogueError as e:
            logger.warning("Cannot open dialogue: %s", e)
            return False

        if self.config.cancel_stale_actions:
            self.dispatcher.cancel_pending()

        self.event_bus.publish(DialogueEvent.DIALOGUE_OPENED, npc_id=npc_id)
        self._apply(effects)
        logger.debug("Dialogue opened with NPC #%d", npc_id)
        return True

    def submit_choice(self, index: int) -> bool:
        """
        Select a choice of the current node (zero-based).

        Returns:
            True if the choice was applied
        """
        try:
            effects = self.navigator.choose(index)
            self._apply(effects)
        except DialogueError as e:
            logger.warning("Choice %r rejected: %s", index, e)
            return False
        return True

    def close_dialogue(self) -> None:
        """Close the open dialogue without firing any action. Idempotent."""
        self._apply(self.navigator.close())

    def update(self, dt: float) -> None:
        """Advance deferred actions."""
        self.scheduler.update(dt)

    # Effects

    def _apply(self, effects: list[Effect]) -> None:
        closed_npc: Optional[int] = None
        actions: list[DispatchAction] = []

        for effect in effects:
            if isinstance(effect, Dispatch):
                actions.append(effect.action)
                continue
            if isinstance(effect, HideDialogue):
                closed_npc = effect.npc_id
            self._apply_one(effect)

        # Teardown is finished before anything is dispatched
        if closed_npc is not None:
            self.event_bus.publish(DialogueEvent.DIALOGUE_CLOSED, npc_id=closed_npc)
            logger.debug("Dialogue closed with NPC #%d", closed_npc)

        for action in actions:
            self._dispatch(action)

    def _apply_one(self, effect: Effect) -> None:
        presenter = self.presenter

        if isinstance(effect, ShowNode):
            presenter.show_node(
                effect.npc_name,
                effect.text,
                list(effect.choices),
                opening=effect.opening,
                typewriter_speed=self.config.typewriter_speed,
            )
            self.event_bus.publish(
                DialogueEvent.NODE_CHANGED,
                npc_id=effect.npc_id,
                npc_name=effect.npc_name,
                node_key=effect.node_key,
                text=effect.text,
                choices=list(effect.choices),
            )
        elif isinstance(effect, HideDialogue):
            presenter.hide_dialogue()
        elif isinstance(effect, EngageCamera):
            if presenter.lookup_entity(effect.npc_id) is not None:
                presenter.engage_camera(
                    effect.npc_id,
                    offset=self.config.camera_offset,
                    fov=self.config.camera_fov,
                )
        elif isinstance(effect, DisengageCamera):
            presenter.disengage_camera()
        elif isinstance(effect, PlayAnimation):
            definition = self.roster.get(effect.npc_id)
            if definition and definition.dialogue_animation and \
                    presenter.lookup_entity(effect.npc_id) is not None:
                presenter.play_animation(effect.npc_id, definition.dialogue_animation)
        elif isinstance(effect, RestoreAnimation):
            definition = self.roster.get(effect.npc_id)
            if definition and presenter.lookup_entity(effect.npc_id) is not None:
                presenter.restore_default_animation(effect.npc_id, definition.scenario)
        elif isinstance(effect, SetPlayerVisible):
            presenter.set_player_visible(effect.visible)

    def _dispatch(self, action: DispatchAction) -> None:
        # Raises MalformedAction before anything is scheduled or announced
        if self.dispatcher.dispatch(action) is None:
            return
        self.event_bus.publish(
            DialogueEvent.ACTION_REQUESTED,
            npc_id=action.npc_id,
            kind=action.kind.value,
            target=action.target,
            args=action.args,
        )

    # NPC management

    def create_dynamic_npc(self, config: Any) -> Optional[int]:
        """
        Create an NPC at runtime.

        Args:
            config: Same shape as a configured NPC; model, coords and a
                dialogue with a start node are required

        Returns:
            The new NPC id (above every static id), or None on failure.
            A failed call changes nothing.
        """
        taken = self.roster.ids | set(self.catalog.ids())
        try:
            definition = parse_definition(config)
            # The id is only reserved once the dialogue validates
            entry = resolve_entry(
                self._ids.peek(taken), definition.name, definition.dialogue,
                self.config.strict_references,
            )
        except DialogueError as e:
            logger.error("Dynamic NPC rejected: %s", e)
            return None

        npc_id = self._ids.allocate(taken)
        self._place(npc_id, definition)
        self.catalog.insert(npc_id, entry, validate=False)

        self.event_bus.publish(NpcEvent.NPC_CREATED, npc_id=npc_id, name=definition.name)
        logger.debug("Dynamic NPC #%d created: %s", npc_id, definition.name)
        return npc_id

    def remove_npc(self, npc_id: int) -> bool:
        """
        Remove an NPC entirely (entity, roster entry and dialogue).

        An open dialogue with that NPC is closed first.
        """
        if npc_id not in self.roster and npc_id not in self.catalog:
            return False

        if self.active_npc_id == npc_id:
            self.close_dialogue()

        self.roster.remove(npc_id)
        self.catalog.remove(npc_id)
        self.presenter.despawn(npc_id)

        self.event_bus.publish(NpcEvent.NPC_REMOVED, npc_id=npc_id)
        logger.debug("Removed NPC #%d", npc_id)
        return True

    def shutdown(self) -> None:
        """Close any dialogue, drop pending actions and despawn every NPC."""
        self.close_dialogue()
        self.dispatcher.cancel_pending()
        for npc_id in self.roster:
            self.presenter.despawn(npc_id)
            self.roster.remove(npc_id)
        logger.debug("Dialogue system shut down")
