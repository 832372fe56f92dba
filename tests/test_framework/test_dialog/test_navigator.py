import pytest
from framework.dialog.catalog import DialogueCatalog
from framework.dialog.effects import (
    Dispatch,
    DisengageCamera,
    EngageCamera,
    HideDialogue,
    PlayAnimation,
    RestoreAnimation,
    SetPlayerVisible,
    ShowNode,
)
from framework.dialog.errors import (
    DanglingReference,
    DialogueClosed,
    InvalidIndex,
    MissingStartNode,
    NotFound,
)
from framework.dialog.models import ActionKind, DispatchAction
from framework.dialog.navigator import Navigator

TREES = {
    1: {"name": "Greeter", "dialogue": {
        "start": {"text": "Hi", "choices": [{"label": "Bye", "action": "close"}]},
    }},
    2: {"name": "Merchant", "dialogue": {
        "start": {"text": "", "choices": [{"label": "Go", "next": "b"}]},
        "b": {"text": "Want to shop?", "choices": [
            {"label": "Shop", "action": "server_event", "event": "shop:open", "args": {"id": 1}},
        ]},
    }},
    3: {"name": "Looper", "dialogue": {
        "start": {"text": "A", "choices": [
            {"label": "to B", "next": "b"},
            {"label": "nowhere", "next": "missing"},
            {"label": "shrug"},
        ]},
        "b": {"text": "B", "choices": [{"label": "back", "next": "start"}]},
    }},
    4: {"name": "Mute", "dialogue": {"hello": {"text": "no start here"}}},
}

@pytest.fixture
def navigator():
    return Navigator(DialogueCatalog(TREES).build())

def test_open_shows_start(navigator):
    effects = navigator.open(1)

    assert navigator.is_open
    assert navigator.session.npc_id == 1
    assert navigator.session.node_key == "start"
    assert effects == [
        EngageCamera(1),
        PlayAnimation(1),
        SetPlayerVisible(False),
        ShowNode(npc_id=1, npc_name="Greeter", node_key="start", text="Hi", choices=("Bye",), opening=True),
    ]

def test_close_choice_closes_without_event(navigator):
    navigator.open(1)
    effects = navigator.choose(0)

    assert not navigator.is_open
    assert effects[:4] == [HideDialogue(1), DisengageCamera(1), RestoreAnimation(1), SetPlayerVisible(True)]
    assert effects[-1] == Dispatch(DispatchAction(kind=ActionKind.CLOSE, npc_id=1))

def test_navigate_then_remote_action(navigator):
    navigator.open(2)
    effects = navigator.choose(0)

    assert navigator.session.node_key == "b"
    assert effects == [ShowNode(npc_id=2, npc_name="Merchant", node_key="b",
                                text="Want to shop?", choices=("Shop",))]

    effects = navigator.choose(0)

    assert not navigator.is_open
    dispatches = [e for e in effects if isinstance(e, Dispatch)]
    assert len(dispatches) == 1
    action = dispatches[0].action
    assert (action.kind, action.target, action.args) == (ActionKind.SERVER_EVENT, "shop:open", {"id": 1})
    # Dispatch comes after every teardown effect
    assert effects.index(dispatches[0]) == len(effects) - 1

def test_round_trip_navigation(navigator):
    navigator.open(3)
    navigator.choose(0)
    assert navigator.session.node_key == "b"
    navigator.choose(0)
    assert navigator.session.node_key == "start"

def test_open_while_open_is_noop(navigator):
    navigator.open(1)
    assert navigator.open(2) == []
    assert navigator.open(1) == []
    assert navigator.session.npc_id == 1

def test_open_unknown_npc(navigator):
    with pytest.raises(NotFound):
        navigator.open(42)
    assert not navigator.is_open

def test_open_missing_start(navigator):
    with pytest.raises(MissingStartNode):
        navigator.open(4)
    assert not navigator.is_open

@pytest.mark.parametrize("index", [-1, 3, 99, True, 1.0, "0", None])
def test_invalid_index_leaves_state(navigator, index):
    navigator.open(3)
    with pytest.raises(InvalidIndex):
        navigator.choose(index)
    assert navigator.session.node_key == "start"

def test_dangling_reference_leaves_state(navigator):
    navigator.open(3)
    with pytest.raises(DanglingReference) as exc_info:
        navigator.choose(1)
    assert exc_info.value.node_key == "missing"
    assert navigator.is_open
    assert navigator.session.node_key == "start"

def test_dead_end_redisplays(navigator):
    navigator.open(3)
    effects = navigator.choose(2)

    assert navigator.session.node_key == "start"
    assert len(effects) == 1
    assert effects[0].node_key == "start"
    assert effects[0].choices == ("to B", "nowhere", "shrug")

def test_choose_after_close_rejected(navigator):
    navigator.open(1)
    navigator.choose(0)
    with pytest.raises(DialogueClosed):
        navigator.choose(0)

def test_close_is_idempotent(navigator):
    assert navigator.close() == []
    navigator.open(1)
    assert len(navigator.close()) == 4
    assert navigator.close() == []
    assert not navigator.is_open

def test_camera_effects_disabled():
    navigator = Navigator(DialogueCatalog(TREES).build(), enable_camera=False)

    opened = navigator.open(1)
    closed = navigator.close()

    assert not any(isinstance(e, (EngageCamera, DisengageCamera)) for e in opened + closed)

def test_session_snapshot_is_detached(navigator):
    navigator.open(3)
    snapshot = navigator.session
    snapshot.node_key = "b"
    assert navigator.session.node_key == "start"
    assert navigator.current_node.text == "A"
