import os
import sys
import pytest
from unittest.mock import MagicMock

# Ensure engine modules can be imported
sys.path.append(os.getcwd())


CITY_GUIDE = {
    "name": "City Guide",
    "model": "s_m_y_cop_01",
    "coords": [100.0, -1000.23, 29.42, 340.0],
    "scenario": "WORLD_HUMAN_CLIPBOARD",
    "dialogueAnimation": {
        "dict": "gestures@m@standing@casual",
        "anim": "gesture_arm_cross_stand",
        "flag": 1,
    },
    "blip": {"sprite": 280, "color": 3, "scale": 0.8, "label": "City Guide"},
    "dialogue": {
        "start": {
            "text": "Hello there! Welcome to the city.",
            "choices": [
                {"label": "I'm looking for a job", "next": "jobs"},
                {"label": "Tell me about the city", "next": "city_info"},
                {"label": "Goodbye", "action": "close"},
            ],
        },
        "jobs": {
            "text": "There are many job opportunities in this city!",
            "choices": [
                {"label": "Register for a job", "action": "event", "event": "jobcenter:open"},
                {"label": "Go back", "next": "start"},
            ],
        },
        "city_info": {
            "text": "This is a beautiful city with many facilities.",
            "choices": [
                {"label": "Where is the hospital?", "next": "hospital_info"},
                {"label": "Go back", "next": "start"},
            ],
        },
        "hospital_info": {
            "text": "The hospital is located in Pillbox Hill.",
            "choices": [
                {"label": "Go back", "next": "city_info"},
            ],
        },
    },
}

SHOP_KEEPER = {
    "name": "Shop Keeper",
    "model": "mp_m_shopkeep_01",
    "coords": [50.0, -1000.23, 29.42, 340.0],
    "scenario": "WORLD_HUMAN_STAND_IMPATIENT",
    "dialogue": {
        "start": {
            "text": "Welcome to my shop! What can I do for you today?",
            "choices": [
                {"label": "I want to buy something", "action": "server_event",
                 "event": "shop:open", "args": {"shopId": 1}},
                {"label": "I want to sell items", "action": "event", "event": "sellmarket:open"},
                {"label": "Open the menu", "action": "command", "command": "menu"},
                {"label": "Goodbye", "action": "close"},
            ],
        },
    },
}


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def scheduler():
    """Fresh Scheduler starting at t=0."""
    from engine.core.scheduler import Scheduler
    return Scheduler()


@pytest.fixture
def npc_definitions():
    """The two configured NPCs, keyed by id."""
    return {1: CITY_GUIDE, 2: SHOP_KEEPER}


@pytest.fixture
def presenter():
    """Presenter mock that reports every NPC entity as present."""
    from framework.world.presenter import Presenter
    mock = MagicMock(spec=Presenter)
    mock.lookup_entity.side_effect = lambda npc_id: f"ped_{npc_id}"
    return mock


@pytest.fixture
def remote():
    from framework.dialog.dispatcher import RemoteTransport
    return MagicMock(spec=RemoteTransport)


@pytest.fixture
def dialogue_system(event_bus, presenter, scheduler, remote, npc_definitions):
    """Built DialogueSystem wired to mocks."""
    from engine.core.config import DialogueConfig
    from framework.systems.dialog import DialogueSystem

    system = DialogueSystem(
        DialogueConfig(),
        event_bus,
        presenter,
        definitions=npc_definitions,
        scheduler=scheduler,
        remote=remote,
    )
    system.build()
    return system
