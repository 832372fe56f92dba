"""
Runtime configuration for the NPC dialogue engine.

Settings can be passed as keyword arguments or loaded from a JSON file
whose keys match the constructor arguments.
"""

from __future__ import annotations

import inspect
import json
import logging
from pathlib import Path
from typing import Any


INTERACTION_METHODS = ("target", "textui")


class DialogueConfig:
    """Configuration for the dialogue engine."""

    def __init__(
        self,
        debug: bool = False,
        interaction_method: str = "target",
        interact_distance: float = 1.5,
        target_icon: str = "fas fa-comments",
        target_label: str = "Talk",
        typewriter_speed: int = 30,
        enable_camera: bool = True,
        camera_offset: tuple[float, float, float] = (0.0, 1.75, 0.0),
        camera_fov: float = 45.0,
        action_delay: float = 0.15,
        cancel_stale_actions: bool = True,
        strict_references: bool = False,
        dynamic_id_start: int = 10000,
        duplicate_location_threshold: float = 0.5,
    ):
        if interaction_method not in INTERACTION_METHODS:
            raise ValueError(
                f"interaction_method must be one of {INTERACTION_METHODS}, "
                f"got {interaction_method!r}"
            )
        if action_delay < 0:
            raise ValueError("action_delay cannot be negative")

        self.debug = debug
        self.interaction_method = interaction_method
        self.interact_distance = interact_distance
        self.target_icon = target_icon
        self.target_label = target_label
        self.typewriter_speed = typewriter_speed
        self.enable_camera = enable_camera
        self.camera_offset = tuple(camera_offset)
        self.camera_fov = camera_fov
        # Seconds between dialogue teardown and a deferred action firing
        self.action_delay = action_delay
        self.cancel_stale_actions = cancel_stale_actions
        self.strict_references = strict_references
        self.dynamic_id_start = dynamic_id_start
        self.duplicate_location_threshold = duplicate_location_threshold

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DialogueConfig:
        """
        Build a config from a dictionary.

        Raises:
            ValueError: If the dictionary contains unknown settings
        """
        known = set(inspect.signature(cls.__init__).parameters) - {"self"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config settings: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_file(cls, path: Path | str) -> DialogueConfig:
        """Load config from a JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in inspect.signature(type(self).__init__).parameters
            if name != "self"
        }

    def apply_logging(self) -> None:
        """Raise the engine and framework loggers to DEBUG when debug is on."""
        level = logging.DEBUG if self.debug else logging.INFO
        for name in ("engine", "framework"):
            logging.getLogger(name).setLevel(level)
