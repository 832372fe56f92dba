"""
Dialogue navigator - the Closed/Open state machine.

Holds the single dialogue session and computes transitions. Each
operation returns the effects the caller must apply; nothing here has
side effects outside the navigator's own state.

    Closed --open(npc)--> Open(start)
    Open --choose(next)--> Open(next)
    Open --choose(action)--> Closed + Dispatch
    Open --choose(dead end)--> Open(same)
    Open --close()--> Closed
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from framework.dialog.catalog import DialogueCatalog
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
from framework.dialog.errors import (
    DanglingReference,
    DialogueClosed,
    InvalidIndex,
    MissingStartNode,
)
from framework.dialog.models import START_NODE, DialogueNode, DialogueSession, NpcEntry


logger = logging.getLogger(__name__)


class Navigator:
    """
    Owns the dialogue session.

    Attributes:
        catalog: Source of NPC dialogue trees
        enable_camera: Emit camera effects on open/close
    """

    def __init__(self, catalog: DialogueCatalog, enable_camera: bool = True):
        self.catalog = catalog
        self.enable_camera = enable_camera
        self._session: Optional[DialogueSession] = None

    @property
    def is_open(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Optional[DialogueSession]:
        """Snapshot of the session (the navigator keeps the only live one)."""
        if self._session is None:
            return None
        return replace(self._session)

    @property
    def current_node(self) -> Optional[DialogueNode]:
        if self._session is None:
            return None
        entry = self.catalog.get(self._session.npc_id)
        return entry.node(self._session.node_key) if entry else None

    def open(self, npc_id: int) -> list[Effect]:
        """
        Open a dialogue at the NPC's start node.

        Opening while a dialogue is already open does nothing.

        Raises:
            NotFound: Unknown NPC
            MissingStartNode: NPC tree has no start node
        """
        if self._session is not None:
            logger.debug(
                "Ignoring open for NPC #%d: dialogue with NPC #%d already open",
                npc_id, self._session.npc_id,
            )
            return []

        entry = self.catalog.require(npc_id)
        if not entry.has_start:
            raise MissingStartNode(npc_id)

        self._session = DialogueSession(npc_id=npc_id, node_key=START_NODE)

        effects: list[Effect] = []
        if self.enable_camera:
            effects.append(EngageCamera(npc_id))
        effects.append(PlayAnimation(npc_id))
        effects.append(SetPlayerVisible(False))
        effects.append(self._show(entry, START_NODE, opening=True))
        return effects

    def choose(self, index: int) -> list[Effect]:
        """
        Resolve the choice at a zero-based index of the current node.

        Raises:
            DialogueClosed: No dialogue is open
            InvalidIndex: Index not an int or out of range (state unchanged)
            DanglingReference: next points at a missing node (state unchanged)
        """
        session = self._session
        if session is None:
            raise DialogueClosed("No dialogue is open")

        entry = self.catalog.require(session.npc_id)
        node = entry.node(session.node_key)
        choices = node.choices if node else ()
        # bool is an int subclass; floats and strings are rejected
        is_int = isinstance(index, int) and not isinstance(index, bool)
        if not is_int or not 0 <= index < len(choices):
            raise InvalidIndex(index, len(choices))

        choice = choices[index]

        if choice.is_navigation:
            if entry.node(choice.next) is None:
                raise DanglingReference(choice.next, session.npc_id)
            session.node_key = choice.next
            return [self._show(entry, choice.next)]

        if choice.action is not None:
            action = choice.to_action(session.npc_id)
            effects = self._teardown()
            effects.append(Dispatch(action))
            return effects

        # Dead end: keep the node on screen
        return [self._show(entry, session.node_key)]

    def close(self) -> list[Effect]:
        """Close the dialogue without dispatching anything. Idempotent."""
        if self._session is None:
            return []
        return self._teardown()

    def _teardown(self) -> list[Effect]:
        npc_id = self._session.npc_id
        self._session = None

        effects: list[Effect] = [HideDialogue(npc_id)]
        if self.enable_camera:
            effects.append(DisengageCamera(npc_id))
        effects.append(RestoreAnimation(npc_id))
        effects.append(SetPlayerVisible(True))
        return effects

    def _show(self, entry: NpcEntry, node_key: str, opening: bool = False) -> ShowNode:
        node = entry.node(node_key)
        return ShowNode(
            npc_id=entry.id,
            npc_name=entry.name,
            node_key=node_key,
            text=node.text,
            choices=tuple(node.labels),
            opening=opening,
        )
