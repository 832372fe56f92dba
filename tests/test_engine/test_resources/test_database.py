import pytest
import json
from pathlib import Path
from engine.resources.database import NpcDatabase

VALID_NPC = {
    "id": 1,
    "name": "Guide",
    "model": "s_m_y_cop_01",
    "coords": [1.0, 2.0, 3.0, 90.0],
    "dialogue": {"start": {"text": "Hi", "choices": [{"label": "Bye", "action": "close"}]}},
}

@pytest.fixture
def mock_db_path(tmp_path):
    (tmp_path / "database" / "npcs").mkdir(parents=True)
    return tmp_path

def write(path, data):
    with open(path, "w") as f:
        json.dump(data, f)

def test_load_all(mock_db_path):
    write(mock_db_path / "database" / "npcs" / "guide.json", [VALID_NPC])

    db = NpcDatabase(mock_db_path)
    npcs = db.load_all()

    assert 1 in npcs
    assert db.get_npc(1)["name"] == "Guide"
    assert "id" not in db.get_npc(1)

def test_single_object_file(mock_db_path):
    write(mock_db_path / "database" / "npcs" / "guide.json", VALID_NPC)

    db = NpcDatabase(mock_db_path)
    db.load_all()

    assert db.get_npc(1) is not None

def test_validation_error(mock_db_path):
    broken = dict(VALID_NPC, id=2)
    del broken["coords"]
    write(mock_db_path / "database" / "npcs" / "npcs.json", [VALID_NPC, broken])

    db = NpcDatabase(mock_db_path)
    db.load_all()

    assert 1 in db.npcs
    assert 2 not in db.npcs # Skipped due to validation error

def test_unknown_action_rejected(mock_db_path):
    bad = dict(VALID_NPC)
    bad["dialogue"] = {"start": {"text": "Hi", "choices": [{"label": "x", "action": "teleport"}]}}
    write(mock_db_path / "database" / "npcs" / "bad.json", bad)

    db = NpcDatabase(mock_db_path)
    db.load_all()

    assert db.npcs == {}

def test_duplicate_id_keeps_first(mock_db_path):
    write(mock_db_path / "database" / "npcs" / "a.json", VALID_NPC)
    write(mock_db_path / "database" / "npcs" / "b.json", dict(VALID_NPC, name="Impostor"))

    db = NpcDatabase(mock_db_path)
    db.load_all()

    assert db.get_npc(1)["name"] == "Guide"

def test_data_schema_overrides_bundled(mock_db_path):
    (mock_db_path / "schemas").mkdir()
    write(mock_db_path / "schemas" / "npc.schema.json", {
        "type": "object",
        "required": ["id", "name"],
    })
    write(mock_db_path / "database" / "npcs" / "guide.json", [{"id": 5, "name": "Only name"}])

    db = NpcDatabase(mock_db_path)
    db.load_all()

    assert db.get_npc(5) == {"name": "Only name"}

def test_missing_directory(tmp_path):
    db = NpcDatabase(tmp_path / "nowhere")
    assert db.load_all() == {}

def test_invalid_json_skipped(mock_db_path):
    (mock_db_path / "database" / "npcs" / "broken.json").write_text("{not json")
    write(mock_db_path / "database" / "npcs" / "guide.json", VALID_NPC)

    db = NpcDatabase(mock_db_path)
    db.load_all()

    assert list(db.npcs) == [1]

def test_from_mapping(tmp_path):
    definitions = {
        1: {k: v for k, v in VALID_NPC.items() if k != "id"},
        2: {"name": "Broken", "coords": [0, 0, 0], "dialogue": {}},
    }

    db = NpcDatabase.from_mapping(definitions, tmp_path)

    assert list(db.npcs) == [1]
    assert "id" not in db.get_npc(1)
