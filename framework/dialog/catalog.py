"""
Dialogue catalog - resolved NPC dialogue trees.

Raw dialogue definitions are resolved into frozen NpcEntry models once,
at build time. A definition that fails validation is logged and left
out; the other NPCs are unaffected.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping, Optional

from pydantic import ValidationError

from framework.dialog.errors import (
    DanglingReference,
    DialogueError,
    DuplicateNpc,
    InvalidConfig,
    NotFound,
)
from framework.dialog.models import DialogueNode, NpcEntry


logger = logging.getLogger(__name__)


def resolve_entry(
    npc_id: int,
    name: Optional[str],
    dialogue: Mapping[str, Any],
    strict_references: bool = False,
) -> NpcEntry:
    """
    Resolve a raw dialogue tree into an NpcEntry.

    Args:
        npc_id: NPC id
        name: Display name (defaults to "NPC")
        dialogue: Mapping of node key -> {"text": ..., "choices": [...]}
        strict_references: Reject trees whose next keys point nowhere

    Returns:
        The validated entry

    Raises:
        InvalidConfig: If a node or choice has the wrong shape
        MalformedAction: If an action choice lacks its event/command name
        DanglingReference: If strict_references is set and a next key is missing
    """
    if not isinstance(dialogue, Mapping):
        raise InvalidConfig(f"NPC #{npc_id} dialogue must be a mapping of nodes")

    try:
        entry = NpcEntry(
            id=npc_id,
            name=name or "NPC",
            dialogue={
                key: node if isinstance(node, DialogueNode) else DialogueNode.model_validate(node)
                for key, node in dialogue.items()
            },
        )
    except ValidationError as e:
        raise InvalidConfig(f"NPC #{npc_id} has an invalid dialogue tree: {e}") from e

    validate_entry(entry, strict_references)
    return entry


def validate_entry(entry: NpcEntry, strict_references: bool = False) -> None:
    """Check action targets and next references of an entry."""
    for node in entry.dialogue.values():
        for choice in node.choices:
            if choice.action is not None:
                choice.to_action(entry.id).validate_target()

    for node_key, target in entry.dangling_references():
        if strict_references:
            raise DanglingReference(target, entry.id)
        logger.warning(
            "NPC #%d node %r points at missing node %r", entry.id, node_key, target,
        )


class DialogueCatalog:
    """
    Mapping from NPC id to its resolved dialogue.

    Usage:
        catalog = DialogueCatalog(definitions)
        catalog.build()
        entry = catalog.get(1)
    """

    def __init__(
        self,
        definitions: Optional[Mapping[int, Any]] = None,
        strict_references: bool = False,
    ):
        """
        Args:
            definitions: npc id -> definition. A definition is anything with
                `name` and `dialogue` attributes, or a dict with those keys.
            strict_references: Reject NPCs with dangling next keys
        """
        self._definitions = dict(definitions or {})
        self.strict_references = strict_references
        self._entries: dict[int, NpcEntry] = {}
        self._built = False

        # npc id -> reason, for definitions rejected at build time
        self.rejected: dict[int, str] = {}

    @property
    def is_built(self) -> bool:
        return self._built

    def build(self) -> DialogueCatalog:
        """Resolve every configured NPC. Subsequent calls do nothing."""
        if self._built:
            return self

        for npc_id, definition in self._definitions.items():
            name, dialogue = _fields(definition)
            try:
                self._entries[npc_id] = resolve_entry(
                    npc_id, name, dialogue, self.strict_references,
                )
            except DialogueError as e:
                self.rejected[npc_id] = str(e)
                logger.error("Rejected dialogue for NPC #%d: %s", npc_id, e)

        self._built = True
        logger.debug(
            "Dialogue catalog built: %d NPCs, %d rejected",
            len(self._entries), len(self.rejected),
        )
        return self

    def get(self, npc_id: int) -> Optional[NpcEntry]:
        return self._entries.get(npc_id)

    def require(self, npc_id: int) -> NpcEntry:
        """
        Get an entry or raise.

        Raises:
            NotFound: If the id is unknown
        """
        entry = self._entries.get(npc_id)
        if entry is None:
            raise NotFound(npc_id)
        return entry

    def insert(self, npc_id: int, entry: NpcEntry, validate: bool = True) -> None:
        """
        Add an entry for a dynamically created NPC.

        Re-inserting identical content is a no-op. Pass validate=False for
        entries that already went through resolve_entry.

        Raises:
            DuplicateNpc: If the id already maps to different content
            ValueError: If entry.id does not match npc_id
        """
        if entry.id != npc_id:
            raise ValueError(f"Entry id {entry.id} does not match key {npc_id}")

        existing = self._entries.get(npc_id)
        if existing is not None:
            if existing == entry:
                return
            raise DuplicateNpc(npc_id)

        if validate:
            validate_entry(entry, self.strict_references)
        self._entries[npc_id] = entry

    def remove(self, npc_id: int) -> Optional[NpcEntry]:
        """Drop an NPC (whole-NPC removal only)."""
        return self._entries.pop(npc_id, None)

    def ids(self) -> list[int]:
        return list(self._entries)

    def __contains__(self, npc_id: object) -> bool:
        return npc_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[NpcEntry]:
        return iter(list(self._entries.values()))


def _fields(definition: Any) -> tuple[Optional[str], Mapping[str, Any]]:
    """Pull (name, dialogue) out of a definition model or dict."""
    if isinstance(definition, Mapping):
        return definition.get("name"), definition.get("dialogue") or {}
    return getattr(definition, "name", None), getattr(definition, "dialogue", None) or {}
