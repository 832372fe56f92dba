"""
Effect descriptions produced by the Navigator.

The Navigator never touches the presentation layer or fires events
itself. It returns a list of these, in the order they must be applied,
and the DialogueSystem carries them out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from framework.dialog.models import DispatchAction


@dataclass(frozen=True)
class ShowNode:
    """Display a node: NPC line plus choice labels in on-screen order."""
    npc_id: int
    npc_name: str
    node_key: str
    text: str
    choices: tuple[str, ...] = field(default_factory=tuple)
    opening: bool = False


@dataclass(frozen=True)
class HideDialogue:
    npc_id: int


@dataclass(frozen=True)
class EngageCamera:
    npc_id: int


@dataclass(frozen=True)
class DisengageCamera:
    npc_id: int


@dataclass(frozen=True)
class PlayAnimation:
    npc_id: int


@dataclass(frozen=True)
class RestoreAnimation:
    npc_id: int


@dataclass(frozen=True)
class SetPlayerVisible:
    visible: bool


@dataclass(frozen=True)
class Dispatch:
    """Hand an action to the dispatcher. Always after the teardown effects."""
    action: DispatchAction


Effect = Union[
    ShowNode,
    HideDialogue,
    EngageCamera,
    DisengageCamera,
    PlayAnimation,
    RestoreAnimation,
    SetPlayerVisible,
    Dispatch,
]
