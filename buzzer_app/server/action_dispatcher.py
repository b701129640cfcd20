"""Routes named client actions to the quiz manager and broadcasts the result."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable

from pydantic import StrictBool, TypeAdapter, ValidationError

from buzzer_app.constants.protocol_constants import (
    ACTION_ADJUST_SCORE,
    ACTION_CORRECT_ANSWER,
    ACTION_END_QUIZ,
    ACTION_INCORRECT_ANSWER,
    ACTION_NEXT_QUESTION,
    ACTION_PRESS_BUTTON,
    ACTION_RESET_ALL_SCORES,
    ACTION_SET_QUESTION,
    ACTION_SET_QUIZ_SETTING,
    ACTION_SET_SCORE,
    ACTION_SET_SHOW_ANSWER,
    ACTION_SET_SHOW_HINT,
    ACTION_UPDATE_PLAYER_NAME,
    ERROR_INVALID_PAYLOAD,
    ERROR_UNKNOWN_ACTION,
)
from buzzer_app.core.models import Notification
from buzzer_app.core.quiz_manager import QuizManager
from buzzer_app.core.quiz_settings import QuizSettingError
from buzzer_app.core.services.broadcaster import BroadcastCoordinator
from buzzer_app.server.schemas import (
    AdjustScorePayload,
    PlayerNamePayload,
    PressButtonPayload,
    QuizSettingPayload,
    SetQuestionPayload,
    SetScorePayload,
)

logger = logging.getLogger(__name__)

_FLAG_ADAPTER = TypeAdapter(StrictBool)

ActionHandler = Callable[[Any], list[Notification]]


class ActionError(Exception):
    """Raised when an action cannot be processed; reported back to the sender only."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class ActionDispatcher:
    """Single entry point for every state change.

    Each action is validated, applied and published while holding one asyncio
    lock, so actions are processed strictly one after another and every client
    receives snapshots in the order the mutations happened. Presses are ranked
    in the order they acquire that lock.

    Publishing happens inside the lock, so a slow client delays later actions
    until its send completes or hits the coordinator's send timeout, after
    which that client is dropped.
    """

    def __init__(self, quiz_manager: QuizManager, coordinator: BroadcastCoordinator) -> None:
        self._quiz_manager = quiz_manager
        self._coordinator = coordinator
        self._lock = asyncio.Lock()
        self._handlers: dict[str, ActionHandler] = {
            ACTION_SET_QUESTION: self._set_question,
            ACTION_UPDATE_PLAYER_NAME: self._update_player_name,
            ACTION_SET_QUIZ_SETTING: self._set_quiz_setting,
            ACTION_CORRECT_ANSWER: lambda _data: quiz_manager.mark_correct(),
            ACTION_INCORRECT_ANSWER: lambda _data: quiz_manager.mark_incorrect(),
            ACTION_END_QUIZ: lambda _data: quiz_manager.end_quiz(),
            ACTION_PRESS_BUTTON: self._press_button,
            ACTION_ADJUST_SCORE: self._adjust_score,
            ACTION_SET_SCORE: self._set_score,
            ACTION_RESET_ALL_SCORES: lambda _data: quiz_manager.reset_all_scores(),
            ACTION_SET_SHOW_HINT: lambda data: quiz_manager.set_show_hint(_parse_flag(data)),
            ACTION_SET_SHOW_ANSWER: lambda data: quiz_manager.set_show_answer(_parse_flag(data)),
            ACTION_NEXT_QUESTION: lambda _data: quiz_manager.start_next_question(),
        }

    def get_action_names(self) -> list[str]:
        return sorted(self._handlers)

    async def dispatch(self, action: str, data: Any = None) -> list[Notification]:
        """Apply ``action`` and broadcast its notifications.

        Returns the notifications that were published; an empty list means the
        action was a rejected no-op. Raises ``ActionError`` for unknown actions
        and malformed payloads.
        """
        handler = self._handlers.get(action)
        if handler is None:
            logger.warning("Unknown action %r", action)
            raise ActionError(ERROR_UNKNOWN_ACTION, f"Unknown action '{action}'")

        async with self._lock:
            try:
                notifications = handler(data)
            except (ValidationError, QuizSettingError) as exc:
                logger.warning("Rejected %s payload %r: %s", action, data, exc)
                raise ActionError(ERROR_INVALID_PAYLOAD, str(exc)) from exc
            if notifications:
                await self._coordinator.publish(notifications)
        return notifications

    # --- Handlers ---

    def _set_question(self, data: Any) -> list[Notification]:
        payload = SetQuestionPayload.model_validate(data)
        return self._quiz_manager.start_question(payload.question, payload.answer, payload.hint)

    def _update_player_name(self, data: Any) -> list[Notification]:
        payload = PlayerNamePayload.model_validate(data)
        return self._quiz_manager.update_player_name(payload.player_id, payload.name)

    def _set_quiz_setting(self, data: Any) -> list[Notification]:
        payload = QuizSettingPayload.model_validate(data)
        return self._quiz_manager.update_setting(payload.to_update())

    def _press_button(self, data: Any) -> list[Notification]:
        payload = PressButtonPayload.model_validate(data)
        timestamp = payload.timestamp
        if timestamp is None:
            timestamp = int(time.time() * 1000)
        return self._quiz_manager.register_press(payload.player_id, timestamp)

    def _adjust_score(self, data: Any) -> list[Notification]:
        payload = AdjustScorePayload.model_validate(data)
        return self._quiz_manager.adjust_score(payload.player_id, payload.delta)

    def _set_score(self, data: Any) -> list[Notification]:
        payload = SetScorePayload.model_validate(data)
        return self._quiz_manager.set_score(payload.player_id, payload.score)


def _parse_flag(data: Any) -> bool:
    return _FLAG_ADAPTER.validate_python(data)
