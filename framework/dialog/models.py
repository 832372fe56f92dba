"""
Dialogue data models.

Catalog data (choices, nodes, NPC entries) is frozen once built. The
session is the only mutable piece and belongs to the Navigator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from framework.dialog.errors import MalformedAction


START_NODE = "start"


class ActionKind(str, Enum):
    """What a terminal choice does once the dialogue closes."""
    CLOSE = "close"
    EVENT = "event"                 # local event
    SERVER_EVENT = "server_event"   # remote event
    COMMAND = "command"

    @classmethod
    def _missing_(cls, value: object) -> Optional[ActionKind]:
        aliases = {
            "local_event": cls.EVENT,
            "remote_event": cls.SERVER_EVENT,
        }
        if isinstance(value, str):
            return aliases.get(value.lower())
        return None

    @property
    def needs_event(self) -> bool:
        return self in (ActionKind.EVENT, ActionKind.SERVER_EVENT)

    @property
    def needs_command(self) -> bool:
        return self is ActionKind.COMMAND


class DispatchAction(BaseModel):
    """
    Instruction handed to the dispatcher when a choice ends the dialogue.

    Attributes:
        kind: Action kind
        target: Event name or command name (unused for close)
        args: Opaque payload forwarded unchanged, or None for no payload
        npc_id: NPC whose dialogue produced the action
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    kind: ActionKind
    target: Optional[str] = None
    args: Optional[dict[Any, Any]] = None
    npc_id: Optional[int] = None

    def validate_target(self) -> None:
        """
        Check that event and command actions name their target.

        Raises:
            MalformedAction: If the target is missing or blank
        """
        if self.kind is ActionKind.CLOSE:
            return
        if not (self.target and self.target.strip()):
            field = "event" if self.kind.needs_event else "command"
            raise MalformedAction(
                f"Action '{self.kind.value}' requires a non-empty {field} name"
            )


class DialogueChoice(BaseModel):
    """
    A single selectable option.

    Leads to another node (next) or ends the dialogue with an action.
    When both are set, next wins. When neither is set the choice is a
    dead end: selecting it keeps the current node on screen.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    label: str
    next: Optional[str] = None
    action: Optional[ActionKind] = None
    event: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("event", "event_name", "eventName"),
    )
    command: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("command", "command_name", "commandName"),
    )
    args: Optional[dict[Any, Any]] = None

    @field_validator("action", mode="before")
    @classmethod
    def _coerce_action(cls, value: Any) -> Any:
        if value is None or isinstance(value, ActionKind):
            return value
        return ActionKind(value)

    @property
    def is_navigation(self) -> bool:
        return bool(self.next)

    @property
    def is_terminal(self) -> bool:
        return not self.is_navigation and self.action is not None

    def to_action(self, npc_id: Optional[int] = None) -> DispatchAction:
        """Build the dispatch instruction for a terminal choice."""
        if self.action is None:
            raise MalformedAction(f"Choice {self.label!r} has no action")

        if self.action.needs_event:
            target = self.event
        elif self.action.needs_command:
            target = self.command
        else:
            target = None

        return DispatchAction(kind=self.action, target=target, args=self.args, npc_id=npc_id)


class DialogueNode(BaseModel):
    """One screen of NPC text plus its ordered choices."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    text: str = ""
    choices: tuple[DialogueChoice, ...] = ()

    @property
    def labels(self) -> list[str]:
        return [choice.label for choice in self.choices]


class NpcEntry(BaseModel):
    """A resolved NPC: its id, display name and dialogue tree."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    id: int
    name: str = "NPC"
    dialogue: dict[str, DialogueNode] = Field(default_factory=dict)

    @property
    def has_start(self) -> bool:
        return START_NODE in self.dialogue

    def node(self, key: str) -> Optional[DialogueNode]:
        return self.dialogue.get(key)

    def dangling_references(self) -> list[tuple[str, str]]:
        """List (node_key, missing_target) pairs for next keys absent from the tree."""
        missing = []
        for key, node in self.dialogue.items():
            for choice in node.choices:
                if choice.next and choice.next not in self.dialogue:
                    missing.append((key, choice.next))
        return missing


@dataclass
class DialogueSession:
    """Which NPC's dialogue is open, and at which node."""
    npc_id: int
    node_key: str = START_NODE
