"""Business logic for the buzzer quiz, shared by the WebSocket server and the controller feed."""

from __future__ import annotations

import logging
from threading import Lock

from buzzer_app.constants.protocol_constants import (
    EVENT_BUTTON_PRESSED,
    EVENT_CORRECT_ANSWER,
    EVENT_INCORRECT_ANSWER,
    EVENT_SCORE_UPDATED,
    EVENT_STATE,
)
from buzzer_app.constants.quiz_constants import DEFAULT_PLAYER_NAME_TEMPLATE, DEFAULT_ROSTER_SIZE
from buzzer_app.core.models import (
    Notification,
    Player,
    QuestionData,
    QuizSetting,
    QuizSettingUpdate,
)
from buzzer_app.core.quiz_settings import merge_quiz_setting
from buzzer_app.core.services.judgment import JudgmentEngine
from buzzer_app.core.services.player_registry import PlayerRegistry
from buzzer_app.core.services.press_arbiter import PressArbiter
from buzzer_app.core.services.question_bank import QuestionBank
from buzzer_app.core.services.quiz_session import QuizSession, SessionPhase

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade for quiz services: Registry, Session, Arbiter, Judgment and QuestionBank.

    Every mutating method runs under one lock and returns the notifications to
    push, ending with a full ``state`` snapshot taken inside the same critical
    section. An empty list means the action was rejected and nothing changed.
    """

    def __init__(
        self,
        roster_size: int = DEFAULT_ROSTER_SIZE,
        name_template: str = DEFAULT_PLAYER_NAME_TEMPLATE,
        setting: QuizSetting | None = None,
    ) -> None:
        self._lock = Lock()

        # Services
        self._registry = PlayerRegistry(roster_size, name_template)
        self._session = QuizSession(self._registry)
        self._arbiter = PressArbiter(self._session, self._registry)
        self._judgment = JudgmentEngine(self._session, self._registry)
        self._question_bank = QuestionBank()

        self._setting = setting or QuizSetting(max_players=roster_size)

    # --- Question lifecycle ---

    def start_question(self, question: str, answer: str, hint: str | None = None) -> list[Notification]:
        with self._lock:
            return self._start_question_locked(QuestionData(question=question, answer=answer, hint=hint))

    def end_quiz(self) -> list[Notification]:
        with self._lock:
            self._session.end_quiz()
            logger.info("Question closed")
            return [self._state_notification()]

    def get_phase(self) -> SessionPhase:
        with self._lock:
            return self._session.phase

    def is_active(self) -> bool:
        with self._lock:
            return self._session.is_active()

    def get_press_order(self) -> list[int]:
        with self._lock:
            return self._session.get_press_order()

    def get_question_data(self) -> QuestionData | None:
        with self._lock:
            return self._session.get_question_data()

    # --- Presses and judgments ---

    def register_press(self, player_id: int, timestamp: int | float | None = None) -> list[Notification]:
        with self._lock:
            outcome = self._arbiter.register_press(player_id, timestamp)
            if not outcome.accepted:
                return []
            return [
                Notification(EVENT_BUTTON_PRESSED, {"playerId": player_id, "timestamp": timestamp}),
                self._state_notification(),
            ]

    def mark_correct(self) -> list[Notification]:
        return self._judge(correct=True)

    def mark_incorrect(self) -> list[Notification]:
        return self._judge(correct=False)

    def _judge(self, correct: bool) -> list[Notification]:
        with self._lock:
            result = self._judgment.judge(correct, self._setting)
            if result is None:
                return []
            verdict_event = EVENT_CORRECT_ANSWER if correct else EVENT_INCORRECT_ANSWER
            return [
                Notification(verdict_event, {"playerId": result.player_id}),
                self._score_notification(result.player_id, result.new_score),
                self._state_notification(),
            ]

    # --- Roster ---

    def update_player_name(self, player_id: int, name: str) -> list[Notification]:
        with self._lock:
            player = self._registry.update_name(player_id, name)
            if player is None:
                logger.warning("Cannot rename unknown player %r", player_id)
                return []
            logger.info("Player %s renamed to %r", player_id, name)
            return [self._state_notification()]

    def adjust_score(self, player_id: int, delta: int) -> list[Notification]:
        with self._lock:
            player = self._registry.adjust_score(player_id, delta)
            if player is None:
                logger.warning("Cannot adjust score of unknown player %r", player_id)
                return []
            logger.info("Player %s score %+d -> %d", player_id, delta, player.score)
            return [self._score_notification(player.id, player.score), self._state_notification()]

    def set_score(self, player_id: int, score: int) -> list[Notification]:
        with self._lock:
            player = self._registry.set_score(player_id, score)
            if player is None:
                logger.warning("Cannot set score of unknown player %r", player_id)
                return []
            logger.info("Player %s score set to %d", player_id, score)
            return [self._score_notification(player.id, player.score), self._state_notification()]

    def reset_all_scores(self) -> list[Notification]:
        with self._lock:
            self._registry.reset_all_scores()
            logger.info("All scores reset")
            return [self._state_notification()]

    def get_players(self) -> list[Player]:
        """Return copies so callers cannot bypass the lock."""
        with self._lock:
            return [
                Player(p.id, p.name, p.score, p.pressed, p.order)
                for p in self._registry.get_players()
            ]

    # --- Settings & display flags ---

    def update_setting(self, update: QuizSettingUpdate) -> list[Notification]:
        """Merge a partial setting. Raises ``QuizSettingError`` without changing anything."""
        with self._lock:
            self._setting = merge_quiz_setting(self._setting, update, len(self._registry))
            logger.info("Quiz setting updated: %s", self._setting)
            return [self._state_notification()]

    def get_setting(self) -> QuizSetting:
        with self._lock:
            return self._setting

    def set_show_hint(self, show: bool) -> list[Notification]:
        with self._lock:
            self._session.set_show_hint(show)
            return [self._state_notification()]

    def set_show_answer(self, show: bool) -> list[Notification]:
        with self._lock:
            self._session.set_show_answer(show)
            return [self._state_notification()]

    # --- Question bank ---

    def load_question_set(self, questions: list[QuestionData]) -> None:
        with self._lock:
            self._question_bank.load(questions)
            logger.info("Loaded %d questions", len(questions))

    def start_next_question(self) -> list[Notification]:
        with self._lock:
            question_data = self._question_bank.next_question()
            if question_data is None:
                logger.info("No further questions in the question set")
                return []
            return self._start_question_locked(question_data)

    def get_question_set(self) -> list[QuestionData]:
        with self._lock:
            return self._question_bank.get_questions()

    def rewind_question_set(self) -> None:
        with self._lock:
            self._question_bank.reset()
            logger.info("Question set rewound")

    def get_question_set_progress(self) -> tuple[int, int]:
        """Return ``(position, remaining)`` for the loaded question set."""
        with self._lock:
            return self._question_bank.position, self._question_bank.remaining

    # --- Snapshots ---

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            return self._session.snapshot(self._setting)

    def state_notification(self) -> Notification:
        with self._lock:
            return self._state_notification()

    def _start_question_locked(self, question_data: QuestionData) -> list[Notification]:
        self._session.start_question(question_data)
        logger.info("Question started: %s", question_data.question)
        return [self._state_notification()]

    def _state_notification(self) -> Notification:
        return Notification(EVENT_STATE, self._session.snapshot(self._setting))

    @staticmethod
    def _score_notification(player_id: int, new_score: int) -> Notification:
        return Notification(EVENT_SCORE_UPDATED, {"playerId": player_id, "newScore": new_score})
