from __future__ import annotations

import pytest

from buzzer_app.core.models import QuizSetting, QuizSettingUpdate
from buzzer_app.core.quiz_settings import QuizSettingError, merge_quiz_setting


def test_only_given_fields_are_merged():
    current = QuizSetting(max_players=6)

    merged = merge_quiz_setting(current, QuizSettingUpdate(answer_time=30, incorrect_points=0), roster_size=6)

    assert merged.answer_time == 30
    assert merged.incorrect_points == 0
    assert merged.hint_time == current.hint_time
    assert merged.correct_points == current.correct_points


def test_empty_update_returns_current_setting():
    current = QuizSetting()

    assert merge_quiz_setting(current, QuizSettingUpdate(), roster_size=6) is current


def test_points_may_be_negative():
    merged = merge_quiz_setting(QuizSetting(), QuizSettingUpdate(correct_points=-2, incorrect_points=-20), 6)

    assert (merged.correct_points, merged.incorrect_points) == (-2, -20)


@pytest.mark.parametrize(
    "update, field_name",
    [
        (QuizSettingUpdate(hint_time=-1), "hint_time"),
        (QuizSettingUpdate(answer_time=-5), "answer_time"),
        (QuizSettingUpdate(answer_break_penalty=-1), "answer_break_penalty"),
        (QuizSettingUpdate(max_players=0), "max_players"),
        (QuizSettingUpdate(max_players=7), "max_players"),
        (QuizSettingUpdate(correct_points=True), "correct_points"),
        (QuizSettingUpdate(hint_time=2.5), "hint_time"),
    ],
)
def test_invalid_fields_are_rejected(update, field_name):
    with pytest.raises(QuizSettingError) as excinfo:
        merge_quiz_setting(QuizSetting(), update, roster_size=6)

    assert excinfo.value.field_name == field_name


def test_answer_break_penalty_is_stored():
    merged = merge_quiz_setting(QuizSetting(), QuizSettingUpdate(answer_break_penalty=2), 6)

    assert merged.to_dict()["answerBreakPenalty"] == 2
