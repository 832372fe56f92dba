"""
NPC definitions and roster.

An NpcDefinition is the raw configured NPC (model, placement, idle
animation, map blip and dialogue tree). The NpcRoster tracks which NPC
occupies which spot so that placing a second NPC on the same spot
replaces the first instead of stacking them.
"""

from __future__ import annotations

import math
from typing import Any, Iterator, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from framework.dialog.errors import InvalidConfig
from framework.dialog.models import START_NODE


REQUIRED_FIELDS = ("model", "coords", "dialogue")


class Coords(BaseModel):
    """World position plus heading in degrees."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    x: float
    y: float
    z: float
    heading: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _from_sequence(cls, data: Any) -> Any:
        # Accept [x, y, z] or [x, y, z, heading] as well as a mapping
        if isinstance(data, (list, tuple)):
            if len(data) not in (3, 4):
                raise ValueError("coords must have 3 or 4 components")
            return dict(zip(("x", "y", "z", "heading"), data))
        if isinstance(data, dict) and "w" in data and "heading" not in data:
            data = dict(data)
            data["heading"] = data.pop("w")
        return data

    def distance_to(self, other: Coords) -> float:
        """3D distance, ignoring heading."""
        return math.dist((self.x, self.y, self.z), (other.x, other.y, other.z))


class DialogueAnimation(BaseModel):
    """Animation the NPC plays while talking."""
    model_config = ConfigDict(frozen=True, extra='forbid', populate_by_name=True)

    dictionary: str = Field(alias="dict")
    anim: str
    flag: int = 1  # 1 = loop


class Blip(BaseModel):
    """Map marker settings."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    sprite: int = 280
    color: int = 3
    scale: float = 0.8
    label: Optional[str] = None


class NpcDefinition(BaseModel):
    """
    A configured NPC.

    Attributes:
        name: Name shown in the dialogue UI
        model: Character model identifier
        coords: Spawn position and heading
        scenario: Idle animation played when not talking
        dialogue_animation: Animation played while the dialogue is open
        blip: Optional map marker
        dialogue: Raw dialogue tree (node key -> {text, choices})
    """
    model_config = ConfigDict(frozen=True, extra='forbid', populate_by_name=True)

    name: str = "NPC"
    model: str
    coords: Coords
    scenario: Optional[str] = None
    dialogue_animation: Optional[DialogueAnimation] = Field(
        default=None, alias="dialogueAnimation",
    )
    blip: Optional[Blip] = None
    dialogue: dict[str, Any]

    @property
    def blip_label(self) -> Optional[str]:
        if self.blip is None:
            return None
        return self.blip.label or self.name


def parse_definition(raw: Any, require_start: bool = True) -> NpcDefinition:
    """
    Validate a raw NPC config.

    Required fields are checked by name first so the error says which one
    is missing; everything else is left to the model. Statically
    configured NPCs pass require_start=False: their start node is only
    checked when a dialogue is opened.

    Raises:
        InvalidConfig: If the config is unusable
    """
    if isinstance(raw, NpcDefinition):
        definition = raw
    else:
        if not isinstance(raw, Mapping):
            raise InvalidConfig("NPC config must be a mapping")

        for field_name in REQUIRED_FIELDS:
            if not raw.get(field_name):
                raise InvalidConfig(
                    f"NPC config missing required field '{field_name}'",
                    field=field_name,
                )

        try:
            definition = NpcDefinition.model_validate(raw)
        except ValidationError as e:
            first = e.errors()[0]
            field_name = str(first["loc"][0]) if first["loc"] else None
            raise InvalidConfig(f"Invalid NPC config: {e}", field=field_name) from e

    if require_start and START_NODE not in definition.dialogue:
        raise InvalidConfig(
            f'NPC dialogue has no "{START_NODE}" node',
            field="dialogue",
        )

    return definition


class NpcIdAllocator:
    """
    Hands out ids for NPCs created at runtime, above the static range.

    Ids are strictly greater than start and are never handed out twice.
    """

    def __init__(self, start: int = 10000):
        self._last = start

    def peek(self, taken: Optional[set[int]] = None) -> int:
        """The id the next allocate() call returns, without reserving it."""
        npc_id = self._last + 1
        while taken and npc_id in taken:
            npc_id += 1
        return npc_id

    def allocate(self, taken: Optional[set[int]] = None) -> int:
        self._last = self.peek(taken)
        return self._last


class NpcRoster:
    """
    Placement registry for spawned NPCs.

    Usage:
        roster = NpcRoster(threshold=0.5)
        roster.add(1, definition)
        occupant = roster.find_at(definition.coords)
    """

    def __init__(self, threshold: float = 0.5):
        self.threshold = threshold
        self._definitions: dict[int, NpcDefinition] = {}

    def add(self, npc_id: int, definition: NpcDefinition) -> None:
        self._definitions[npc_id] = definition

    def remove(self, npc_id: int) -> Optional[NpcDefinition]:
        return self._definitions.pop(npc_id, None)

    def get(self, npc_id: int) -> Optional[NpcDefinition]:
        return self._definitions.get(npc_id)

    def find_at(self, coords: Coords) -> Optional[int]:
        """Id of the NPC standing within the threshold of coords, if any."""
        for npc_id, definition in self._definitions.items():
            if definition.coords.distance_to(coords) < self.threshold:
                return npc_id
        return None

    @property
    def ids(self) -> set[int]:
        return set(self._definitions)

    def __contains__(self, npc_id: object) -> bool:
        return npc_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._definitions))
