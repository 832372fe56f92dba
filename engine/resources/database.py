"""
NPC Database.

Handles loading and validation of configured NPCs from JSON files.

Layout:
    <data>/schemas/npc.schema.json      (optional, overrides the bundled schema)
    <data>/database/npcs/*.json         (one NPC object or a list of them)
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import jsonschema


BUNDLED_SCHEMA = Path(__file__).parent / "schemas" / "npc.schema.json"


class NpcDatabase:
    """
    Central storage for configured NPC definitions.
    """

    def __init__(self, data_path: Path | str):
        self._data_path = Path(data_path)
        self._schema: dict[str, Any] | None = None

        # npc id -> raw definition (without the id key)
        self.npcs: dict[int, dict[str, Any]] = {}

        self.logger = logging.getLogger(__name__)

    def load_all(self) -> dict[int, dict[str, Any]]:
        """Load every NPC file from disk."""
        self._schema = self._load_schema()
        self.npcs = self._load_category("npcs")

        self.logger.info(f"Loaded {len(self.npcs)} NPCs.")
        return self.npcs

    def _load_schema(self) -> dict[str, Any] | None:
        """Load the NPC schema, preferring one shipped with the data."""
        for schema_file in (self._data_path / "schemas" / "npc.schema.json", BUNDLED_SCHEMA):
            if not schema_file.exists():
                continue
            try:
                with open(schema_file, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load schema {schema_file}: {e}")

        self.logger.warning("No NPC schema found")
        return None

    def _load_category(self, folder: str) -> dict[int, dict[str, Any]]:
        """Load all JSON files in a category folder."""
        category_dir = self._data_path / "database" / folder
        data_store: dict[int, dict[str, Any]] = {}

        if not category_dir.exists():
            self.logger.warning(f"Data directory not found: {category_dir}")
            return data_store

        if self._schema is None:
            self.logger.warning(f"No schema for {folder}, nothing loaded")
            return data_store

        for file_path in sorted(category_dir.glob("*.json")):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                continue

            items = data if isinstance(data, list) else [data]
            for item in items:
                if not self._validate(item, file_path):
                    continue

                npc_id = item["id"]
                if npc_id in data_store:
                    self.logger.warning(f"Duplicate NPC id {npc_id} in {file_path}, keeping the first")
                    continue
                data_store[npc_id] = {k: v for k, v in item.items() if k != "id"}

        return data_store

    def _validate(self, item: Any, source: Any) -> bool:
        try:
            jsonschema.validate(instance=item, schema=self._schema)
        except jsonschema.ValidationError as e:
            self.logger.error(f"Validation error in {source}: {e.message}")
            return False
        return True

    @classmethod
    def from_mapping(
        cls,
        definitions: Mapping[int, dict[str, Any]],
        data_path: Path | str = ".",
    ) -> "NpcDatabase":
        """
        Build a database from in-memory definitions keyed by NPC id.

        Entries are validated against the same schema as files; invalid
        ones are logged and skipped.
        """
        database = cls(data_path)
        database._schema = database._load_schema()
        if database._schema is None:
            return database

        for npc_id, definition in definitions.items():
            item = {**definition, "id": npc_id}
            if database._validate(item, f"NPC #{npc_id}"):
                database.npcs[npc_id] = dict(definition)

        return database

    def get_npc(self, npc_id: int) -> dict[str, Any] | None:
        return self.npcs.get(npc_id)
