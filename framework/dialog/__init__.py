"""
Dialog module - NPC dialogue trees and their navigation.

Provides:
- Dialogue models (choices, nodes, NPC entries, session)
- Catalog of resolved dialogue trees
- Navigator state machine
- Deferred action dispatch
"""

from framework.dialog.models import (
    ActionKind,
    DialogueChoice,
    DialogueNode,
    DialogueSession,
    DispatchAction,
    NpcEntry,
    START_NODE,
)
from framework.dialog.errors import (
    DialogueError,
    NotFound,
    MissingStartNode,
    InvalidIndex,
    DanglingReference,
    MalformedAction,
    InvalidConfig,
    DialogueClosed,
    DuplicateNpc,
)
from framework.dialog.catalog import DialogueCatalog, resolve_entry
from framework.dialog.navigator import Navigator
from framework.dialog.dispatcher import ActionDispatcher, RemoteTransport

__all__ = [
    # Models
    "ActionKind",
    "DialogueChoice",
    "DialogueNode",
    "DialogueSession",
    "DispatchAction",
    "NpcEntry",
    "START_NODE",
    # Errors
    "DialogueError",
    "NotFound",
    "MissingStartNode",
    "InvalidIndex",
    "DanglingReference",
    "MalformedAction",
    "InvalidConfig",
    "DialogueClosed",
    "DuplicateNpc",
    # Components
    "DialogueCatalog",
    "resolve_entry",
    "Navigator",
    "ActionDispatcher",
    "RemoteTransport",
]
