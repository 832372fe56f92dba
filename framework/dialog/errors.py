"""
Dialogue errors.

Every error here is recoverable: the navigator is left either unchanged
or cleanly closed, and the DialogueSystem boundary logs and reports the
failure instead of letting it reach the game loop.
"""

from __future__ import annotations

from typing import Optional


class DialogueError(Exception):
    """Base class for all dialogue errors."""


class NotFound(DialogueError, KeyError):
    """Unknown NPC id."""

    def __init__(self, npc_id: int):
        super().__init__(f"NPC #{npc_id} not found")
        self.npc_id = npc_id

    def __str__(self) -> str:
        # KeyError would quote the message
        return self.args[0]


class MissingStartNode(DialogueError):
    """The NPC's dialogue tree has no 'start' node."""

    def __init__(self, npc_id: int):
        super().__init__(f'NPC #{npc_id} has no "start" dialogue node')
        self.npc_id = npc_id


class InvalidIndex(DialogueError, IndexError):
    """Choice index that is not an integer or is out of range for the current node."""

    def __init__(self, index: int, count: int):
        super().__init__(f"Invalid choice index {index!r} (node has {count} choices)")
        self.index = index
        self.count = count


class DanglingReference(DialogueError):
    """A choice points at a node that does not exist in the tree."""

    def __init__(self, node_key: str, npc_id: Optional[int] = None):
        where = f" in NPC #{npc_id}" if npc_id is not None else ""
        super().__init__(f"Dialogue node {node_key!r} does not exist{where}")
        self.node_key = node_key
        self.npc_id = npc_id


class MalformedAction(DialogueError, ValueError):
    """An action is missing the event or command it targets."""


class InvalidConfig(DialogueError, ValueError):
    """NPC configuration is missing a required field or is invalid."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DialogueClosed(DialogueError):
    """A choice was submitted while no dialogue is open."""


class DuplicateNpc(DialogueError, ValueError):
    """An NPC id is already mapped to different dialogue content."""

    def __init__(self, npc_id: int):
        super().__init__(f"NPC #{npc_id} is already registered with different content")
        self.npc_id = npc_id
