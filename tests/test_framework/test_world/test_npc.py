import pytest
from framework.dialog.errors import InvalidConfig
from framework.world.npc import (
    Coords,
    NpcDefinition,
    NpcIdAllocator,
    NpcRoster,
    parse_definition,
)

def test_parse_full_definition(npc_definitions):
    definition = parse_definition(npc_definitions[1])

    assert definition.name == "City Guide"
    assert definition.coords == Coords(x=100.0, y=-1000.23, z=29.42, heading=340.0)
    assert definition.dialogue_animation.dictionary == "gestures@m@standing@casual"
    assert definition.dialogue_animation.flag == 1
    assert definition.blip_label == "City Guide"

def test_blip_defaults():
    definition = parse_definition({
        "name": "Vendor",
        "model": "m",
        "coords": {"x": 0, "y": 0, "z": 0, "w": 90},
        "blip": {},
        "dialogue": {"start": {"text": "Hi"}},
    })

    assert definition.coords.heading == 90
    assert (definition.blip.sprite, definition.blip.color, definition.blip.scale) == (280, 3, 0.8)
    assert definition.blip_label == "Vendor"

@pytest.mark.parametrize("field", ["model", "coords", "dialogue"])
def test_missing_required_field(field):
    raw = {"model": "m", "coords": [0, 0, 0], "dialogue": {"start": {"text": "Hi"}}}
    del raw[field]

    with pytest.raises(InvalidConfig) as exc_info:
        parse_definition(raw)
    assert exc_info.value.field == field

def test_missing_start_node():
    raw = {"model": "m", "coords": [0, 0, 0], "dialogue": {"intro": {"text": "Hi"}}}

    with pytest.raises(InvalidConfig) as exc_info:
        parse_definition(raw)
    assert exc_info.value.field == "dialogue"

    # Configured NPCs defer the check until the dialogue is opened
    assert parse_definition(raw, require_start=False).name == "NPC"

def test_invalid_shape():
    with pytest.raises(InvalidConfig):
        parse_definition(None)
    with pytest.raises(InvalidConfig):
        parse_definition({"model": "m", "coords": [0, 0], "dialogue": {"start": {}}})
    with pytest.raises(InvalidConfig):
        parse_definition({"model": "m", "coords": [0, 0, 0], "dialogue": {"start": {}}, "unknown": 1})

def test_id_allocator_above_static_range():
    ids = NpcIdAllocator(10000)
    assert ids.allocate() == 10001
    assert ids.allocate(taken={10002, 10003}) == 10004

def test_id_allocator_peek_reserves_nothing():
    ids = NpcIdAllocator(20000)

    assert ids.peek() == 20001
    assert ids.peek(taken={20001}) == 20002
    assert ids.allocate() == 20001
    assert ids.peek() == 20002

def test_coords_distance_ignores_heading():
    a = Coords(x=0, y=0, z=0, heading=0)
    b = Coords(x=3, y=4, z=0, heading=180)
    assert a.distance_to(b) == pytest.approx(5.0)

def test_roster_find_at():
    roster = NpcRoster(threshold=0.5)
    definition = NpcDefinition(model="m", coords=[10, 10, 10], dialogue={})
    roster.add(1, definition)

    assert roster.find_at(Coords(x=10.2, y=10.2, z=10.0)) == 1
    assert roster.find_at(Coords(x=11, y=10, z=10)) is None

    assert roster.remove(1) is definition
    assert 1 not in roster
    assert len(roster) == 0
