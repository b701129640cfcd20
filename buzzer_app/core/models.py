"""Domain models for the buzzer quiz.

Models serialize themselves to the camelCase shape the clients consume, so the
snapshot sent over the push channel is assembled without a separate schema layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from buzzer_app.constants.quiz_constants import (
    DEFAULT_ANSWER_BREAK_PENALTY,
    DEFAULT_ANSWER_TIME_SECONDS,
    DEFAULT_CORRECT_POINTS,
    DEFAULT_HINT_TIME_SECONDS,
    DEFAULT_INCORRECT_POINTS,
    DEFAULT_ROSTER_SIZE,
)


@dataclass(slots=True)
class Player:
    """One roster slot. ``pressed`` and ``order`` are only set while queued."""

    id: int
    name: str
    score: int = 0
    pressed: bool = False
    order: int | None = None

    def mark_pressed(self, order: int) -> None:
        self.pressed = True
        self.order = order

    def clear_press(self) -> None:
        self.pressed = False
        self.order = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "score": self.score,
            "pressed": self.pressed,
            "order": self.order,
        }


@dataclass(frozen=True, slots=True)
class QuestionData:
    """Question shown to players; replaced wholesale, never edited in place."""

    question: str
    answer: str
    hint: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {"question": self.question, "answer": self.answer, "hint": self.hint}


@dataclass(frozen=True, slots=True)
class QuizSetting:
    """Scoring and timing policy. Timers are enforced by clients, not the server."""

    max_players: int = DEFAULT_ROSTER_SIZE
    hint_time: int = DEFAULT_HINT_TIME_SECONDS
    answer_time: int = DEFAULT_ANSWER_TIME_SECONDS
    correct_points: int = DEFAULT_CORRECT_POINTS
    incorrect_points: int = DEFAULT_INCORRECT_POINTS
    answer_break_penalty: int = DEFAULT_ANSWER_BREAK_PENALTY  # stored only; no judgment path reads it

    def to_dict(self) -> dict[str, object]:
        return {
            "maxPlayers": self.max_players,
            "hintTime": self.hint_time,
            "answerTime": self.answer_time,
            "correctPoints": self.correct_points,
            "incorrectPoints": self.incorrect_points,
            "answerBreakPenalty": self.answer_break_penalty,
        }


@dataclass(slots=True)
class QuizSettingUpdate:
    """Partial settings change; ``None`` means keep the current value."""

    max_players: int | None = None
    hint_time: int | None = None
    answer_time: int | None = None
    correct_points: int | None = None
    incorrect_points: int | None = None
    answer_break_penalty: int | None = None


@dataclass(slots=True)
class UIState:
    """Display flags toggled by the host."""

    show_hint: bool = False
    show_answer: bool = False

    def reset(self) -> None:
        self.show_hint = False
        self.show_answer = False


@dataclass(frozen=True, slots=True)
class Notification:
    """A named event pushed to clients."""

    event: str
    data: dict[str, object] = field(default_factory=dict)

    def to_message(self) -> dict[str, object]:
        return {"event": self.event, "data": self.data}
