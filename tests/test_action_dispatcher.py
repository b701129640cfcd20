from __future__ import annotations

import asyncio

import pytest

from buzzer_app.core.services.broadcaster import BroadcastCoordinator
from buzzer_app.server.action_dispatcher import ActionDispatcher, ActionError


@pytest.fixture
def wired(manager, channel_factory):
    coordinator = BroadcastCoordinator(manager)
    dispatcher = ActionDispatcher(manager, coordinator)
    channel = channel_factory()
    asyncio.run(coordinator.connect("viewer", channel))
    channel.sent_messages.clear()
    return dispatcher, channel


def _run(dispatcher, *actions):
    async def scenario():
        for action, data in actions:
            await dispatcher.dispatch(action, data)

    asyncio.run(scenario())


def test_every_documented_action_is_routed(wired):
    dispatcher, _ = wired

    assert set(dispatcher.get_action_names()) == {
        "setQuestion",
        "updatePlayerName",
        "setQuizSetting",
        "correctAnswer",
        "incorrectAnswer",
        "endQuiz",
        "pressButton",
        "adjustScore",
        "setScore",
        "resetAllScores",
        "setShowHint",
        "setShowAnswer",
        "nextQuestion",
    }


def test_round_through_dispatcher(wired, manager):
    dispatcher, channel = wired

    _run(
        dispatcher,
        ("setQuestion", {"question": "Q", "answer": "A", "hint": None}),
        ("pressButton", {"playerId": 2, "timestamp": 10}),
        ("pressButton", {"buttonId": 1, "timestamp": 5}),
        ("incorrectAnswer", None),
        ("correctAnswer", None),
    )

    assert channel.events() == [
        "state",
        "buttonPressed", "state",
        "buttonPressed", "state",
        "incorrectAnswer", "scoreUpdated", "state",
        "correctAnswer", "scoreUpdated", "state",
    ]
    scores = {p.id: p.score for p in manager.get_players()}
    assert scores == {1: 10, 2: -5, 3: 0}


def test_press_without_timestamp_gets_server_time(wired):
    dispatcher, channel = wired

    _run(dispatcher, ("setQuestion", {"question": "Q", "answer": "A"}), ("pressButton", {"playerId": 3}))

    assert isinstance(channel.last("buttonPressed")["timestamp"], int)


def test_rejected_actions_broadcast_nothing(wired):
    dispatcher, channel = wired

    _run(
        dispatcher,
        ("pressButton", {"playerId": 1}),
        ("correctAnswer", None),
        ("updatePlayerName", {"playerId": 9, "name": "Ghost"}),
        ("adjustScore", {"playerId": 0, "delta": 3}),
    )

    assert channel.sent_messages == []


def test_score_and_setting_actions(wired, manager):
    dispatcher, channel = wired

    _run(
        dispatcher,
        ("updatePlayerName", {"playerId": 1, "name": "Alex"}),
        ("adjustScore", {"playerId": 1, "delta": 4}),
        ("setScore", {"playerId": 2, "score": 12}),
        ("setQuizSetting", {"correctPoints": 20, "hintTime": 5}),
        ("setShowHint", True),
        ("setShowAnswer", False),
    )

    state = channel.last("state")
    assert state["players"][0]["name"] == "Alex"
    assert [p["score"] for p in state["players"]] == [4, 12, 0]
    assert state["setting"]["correctPoints"] == 20
    assert state["setting"]["hintTime"] == 5
    assert state["showHint"] is True

    _run(dispatcher, ("resetAllScores", None))
    assert [p["score"] for p in channel.last("state")["players"]] == [0, 0, 0]


def test_unknown_action_raises(wired):
    dispatcher, channel = wired

    with pytest.raises(ActionError) as excinfo:
        _run(dispatcher, ("launchConfetti", None))

    assert excinfo.value.code == "unknown_action"
    assert channel.sent_messages == []


@pytest.mark.parametrize(
    "action, data",
    [
        ("setQuestion", {"question": "Q"}),
        ("setQuestion", {"question": 1, "answer": "A"}),
        ("setQuestion", None),
        ("pressButton", {"playerId": "1"}),
        ("adjustScore", {"playerId": 1, "delta": 1.5}),
        ("setQuizSetting", {"unknownField": 1}),
        ("setQuizSetting", {"hintTime": -3}),
        ("setQuizSetting", {"maxPlayers": 10}),
        ("setShowHint", "yes"),
    ],
)
def test_malformed_payloads_raise_invalid_payload(wired, manager, action, data):
    dispatcher, channel = wired
    before = manager.snapshot()

    with pytest.raises(ActionError) as excinfo:
        _run(dispatcher, (action, data))

    assert excinfo.value.code == "invalid_payload"
    assert channel.sent_messages == []
    assert manager.snapshot() == before
