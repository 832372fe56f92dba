"""
NPC Dialogue Demo

Demonstrates:
- Loading configured NPCs from JSON with schema validation
- Walking a dialogue tree
- Deferred server/local/command actions
- Creating and removing an NPC at runtime

Runs headless: the LoggingPresenter prints what a game would draw.

Run: python -m demos.npc_demo
"""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from engine.core import DialogueConfig, DialogueEvent, EventBus, NpcEvent
from engine.resources.database import NpcDatabase
from framework.dialog.dispatcher import RemoteTransport
from framework.systems.dialog import DialogueSystem
from framework.world.presenter import LoggingPresenter


DATA_PATH = Path(__file__).parent / "data"
FRAME = 1 / 60


class PrintTransport(RemoteTransport):
    """Stands in for the game server."""

    def send(self, event_name, *payload):
        print(f"-> server: {event_name} {payload[0] if payload else ''}")


def run_frames(system: DialogueSystem, seconds: float) -> None:
    for _ in range(round(seconds / FRAME)):
        system.update(FRAME)


def main():
    """Run the NPC dialogue demo."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    config = DialogueConfig.from_file(DATA_PATH / "config.json")
    config.apply_logging()

    event_bus = EventBus()
    event_bus.subscribe(
        DialogueEvent.ACTION_REQUESTED,
        lambda e: print(f"Action requested: {e['kind']} {e['target']}"),
        weak=False,
    )
    event_bus.subscribe(
        NpcEvent.NPC_CREATED,
        lambda e: print(f"NPC #{e['npc_id']} created: {e['name']}"),
        weak=False,
    )

    database = NpcDatabase(DATA_PATH)
    system = DialogueSystem(
        config,
        event_bus,
        LoggingPresenter(),
        definitions=database.load_all(),
        remote=PrintTransport(),
        command_executor=lambda command, *args: print(f"-> command: /{command}"),
    )
    system.dispatcher.register_local_handler(
        "jobcenter:open", lambda *args: print("-> job center opened"),
    )
    system.build()

    print("=" * 50)
    print("City guide: ask about the hospital, then leave")
    print("=" * 50)
    system.open_dialogue(1)
    system.submit_choice(1)   # Tell me about the city
    system.submit_choice(0)   # Where is the hospital?
    system.submit_choice(0)   # Go back
    system.submit_choice(1)   # Go back
    system.submit_choice(2)   # Goodbye
    run_frames(system, 0.5)

    print("=" * 50)
    print("Shop keeper: buy something")
    print("=" * 50)
    system.open_dialogue(2)
    system.submit_choice(0)
    run_frames(system, 0.5)

    print("=" * 50)
    print("Runtime NPC")
    print("=" * 50)
    npc_id = system.create_dynamic_npc({
        "name": "Street Vendor",
        "model": "a_m_m_farmer_01",
        "coords": [150.0, -1040.0, 29.3, 160.0],
        "dialogue": {
            "start": {
                "text": "Fresh hot dogs!",
                "choices": [
                    {"label": "Open the menu", "action": "command", "command": "menu"},
                    {"label": "No thanks", "action": "close"},
                ],
            },
        },
    })
    if npc_id is not None:
        system.open_dialogue(npc_id)
        system.submit_choice(0)
        run_frames(system, 0.5)
        system.remove_npc(npc_id)

    system.shutdown()


if __name__ == "__main__":
    main()
