from __future__ import annotations

import pytest

from buzzer_app.core.models import QuestionData, QuizSettingUpdate
from buzzer_app.core.quiz_settings import QuizSettingError
from buzzer_app.core.services.quiz_session import SessionPhase


def _events(notifications):
    return [n.event for n in notifications]


def _players(manager):
    return {p.id: p for p in manager.get_players()}


def test_three_player_round(manager):
    manager.start_question("Capital of France?", "Paris", None)
    for player_id in (1, 2, 3):
        manager.register_press(player_id, timestamp=1_000 + player_id)

    assert manager.get_press_order() == [1, 2, 3]
    assert [p.order for p in manager.get_players()] == [1, 2, 3]

    manager.mark_incorrect()
    players = _players(manager)
    assert players[1].score == -5
    assert manager.get_press_order() == [2, 3]
    assert (players[2].order, players[3].order) == (1, 2)
    assert manager.is_active()

    manager.mark_correct()
    players = _players(manager)
    assert players[2].score == 10
    assert not manager.is_active()
    assert manager.get_press_order() == []
    assert manager.get_phase() is SessionPhase.ENDED


def test_press_notifications_carry_timestamp_then_state(manager):
    manager.start_question("Q", "A")

    notifications = manager.register_press(2, timestamp=12345)

    assert _events(notifications) == ["buttonPressed", "state"]
    assert notifications[0].data == {"playerId": 2, "timestamp": 12345}
    assert notifications[1].data["pressOrder"] == [2]


def test_rejected_press_produces_no_notifications(manager):
    assert manager.register_press(1) == []

    manager.start_question("Q", "A")
    manager.register_press(1)
    assert manager.register_press(1) == []
    assert manager.register_press(42) == []


def test_judgment_notifications(manager):
    manager.start_question("Q", "A")
    manager.register_press(3)

    notifications = manager.mark_correct()

    assert _events(notifications) == ["correctAnswer", "scoreUpdated", "state"]
    assert notifications[0].data == {"playerId": 3}
    assert notifications[1].data == {"playerId": 3, "newScore": 10}
    assert notifications[2].data["isActive"] is False


def test_incorrect_answer_notifications(manager):
    manager.start_question("Q", "A")
    manager.register_press(1)

    notifications = manager.mark_incorrect()

    assert _events(notifications) == ["incorrectAnswer", "scoreUpdated", "state"]
    assert notifications[1].data == {"playerId": 1, "newScore": -5}


def test_judging_without_presses_broadcasts_nothing(manager):
    manager.start_question("Q", "A")
    before = manager.snapshot()

    assert manager.mark_correct() == []
    assert manager.mark_incorrect() == []
    assert manager.snapshot() == before


def test_set_question_resets_state_regardless_of_prior_state(manager):
    manager.start_question("Q1", "A1", "H1")
    manager.register_press(1)
    manager.register_press(2)
    manager.set_show_hint(True)
    manager.set_show_answer(True)

    manager.start_question("Q2", "A2")

    snapshot = manager.snapshot()
    assert snapshot["questionData"] == {"question": "Q2", "answer": "A2", "hint": None}
    assert snapshot["pressOrder"] == []
    assert snapshot["showHint"] is False and snapshot["showAnswer"] is False
    assert all(not p["pressed"] and p["order"] is None for p in snapshot["players"])


def test_end_quiz_always_broadcasts_state(manager):
    assert _events(manager.end_quiz()) == ["state"]
    assert manager.get_phase() is SessionPhase.IDLE


def test_roster_operations(manager):
    assert _events(manager.update_player_name(1, "Alex")) == ["state"]
    assert _events(manager.adjust_score(1, 7)) == ["scoreUpdated", "state"]
    notifications = manager.set_score(2, -3)
    assert notifications[0].data == {"playerId": 2, "newScore": -3}

    players = _players(manager)
    assert (players[1].name, players[1].score, players[2].score) == ("Alex", 7, -3)


def test_roster_operations_on_unknown_player_are_dropped(manager):
    before = manager.snapshot()

    assert manager.update_player_name(9, "Ghost") == []
    assert manager.adjust_score(0, 5) == []
    assert manager.set_score(-1, 5) == []
    assert manager.snapshot() == before


def test_reset_all_scores_preserves_names_and_presses(manager):
    manager.update_player_name(2, "Sam")
    manager.adjust_score(2, 20)
    manager.start_question("Q", "A")
    manager.register_press(2)

    manager.reset_all_scores()

    players = _players(manager)
    assert all(p.score == 0 for p in players.values())
    assert players[2].name == "Sam"
    assert players[2].pressed and players[2].order == 1
    assert manager.get_press_order() == [2]


def test_settings_drive_scoring(manager):
    manager.update_setting(QuizSettingUpdate(correct_points=3, incorrect_points=-1))
    manager.start_question("Q", "A")
    manager.register_press(1)
    manager.register_press(2)

    manager.mark_incorrect()
    manager.mark_correct()

    players = _players(manager)
    assert (players[1].score, players[2].score) == (-1, 3)
    assert manager.snapshot()["setting"]["correctPoints"] == 3


def test_invalid_setting_update_changes_nothing(manager):
    before = manager.get_setting()

    with pytest.raises(QuizSettingError):
        manager.update_setting(QuizSettingUpdate(correct_points=1, hint_time=-1))

    assert manager.get_setting() == before


def test_display_flags(manager):
    manager.set_show_hint(True)
    notifications = manager.set_show_answer(True)

    assert notifications[0].data["showHint"] is True
    assert notifications[0].data["showAnswer"] is True


def test_question_bank_progression(manager):
    manager.load_question_set(
        [QuestionData("Q1", "A1"), QuestionData("Q2", "A2", "H2")]
    )

    manager.start_next_question()
    assert manager.get_question_data().question == "Q1"
    manager.start_question("Ad hoc", "Answer")
    manager.start_next_question()
    assert manager.get_question_data() == QuestionData("Q2", "A2", "H2")
    assert manager.get_question_set_progress() == (1, 0)

    assert manager.start_next_question() == []
    assert manager.get_question_data().question == "Q2"


def test_next_question_without_a_question_set(manager):
    assert manager.start_next_question() == []
    assert manager.get_phase() is SessionPhase.IDLE


def test_rewound_question_set_starts_over(manager):
    manager.load_question_set([QuestionData("Q1", "A1"), QuestionData("Q2", "A2")])
    manager.start_next_question()
    manager.start_next_question()
    assert manager.start_next_question() == []

    manager.rewind_question_set()

    assert manager.get_question_set_progress() == (-1, 2)
    manager.start_next_question()
    assert manager.get_question_data().question == "Q1"
