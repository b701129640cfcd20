"""Service for managing the current question and its press queue."""

from __future__ import annotations

from enum import Enum

from buzzer_app.core.models import Player, QuestionData, QuizSetting, UIState
from buzzer_app.core.services.player_registry import PlayerRegistry


class SessionPhase(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    ENDED = "ended"


class QuizSession:
    """Owns the question lifecycle, the press queue and the display flags.

    The queue and the players' ``pressed``/``order`` fields are only changed
    through this class so they never drift apart.
    """

    def __init__(self, registry: PlayerRegistry) -> None:
        self._registry = registry
        self._question_data: QuestionData | None = None
        self._is_active: bool = False
        self._press_order: list[int] = []
        self._ui_state = UIState()

    # --- Lifecycle ---

    def start_question(self, question_data: QuestionData) -> None:
        """Begin a question. Always a hard reset, whatever the previous phase."""
        self._question_data = question_data
        self._is_active = True
        self._clear_press_queue()
        self._ui_state.reset()

    def end_quiz(self) -> None:
        """Stop accepting presses and clear the queue; question and scores stay."""
        self._is_active = False
        self._clear_press_queue()

    @property
    def phase(self) -> SessionPhase:
        if self._is_active:
            return SessionPhase.ACTIVE
        if self._question_data is None:
            return SessionPhase.IDLE
        return SessionPhase.ENDED

    def is_active(self) -> bool:
        return self._is_active

    def get_question_data(self) -> QuestionData | None:
        return self._question_data

    # --- Press queue ---

    def get_press_order(self) -> list[int]:
        return list(self._press_order)

    def front_player_id(self) -> int | None:
        return self._press_order[0] if self._press_order else None

    def enqueue(self, player: Player) -> int:
        """Append ``player`` to the queue and return its 1-based rank."""
        rank = len(self._press_order) + 1
        player.mark_pressed(rank)
        self._press_order.append(player.id)
        return rank

    def retract_front(self) -> int | None:
        """Drop the front-runner and re-rank everyone still queued."""
        if not self._press_order:
            return None
        player_id = self._press_order.pop(0)
        retracted = self._registry.get(player_id)
        if retracted is not None:
            retracted.clear_press()
        for rank, queued_id in enumerate(self._press_order, start=1):
            queued = self._registry.get(queued_id)
            if queued is not None:
                queued.order = rank
        return player_id

    def _clear_press_queue(self) -> None:
        self._press_order = []
        self._registry.clear_presses()

    # --- Display flags ---

    def set_show_hint(self, show: bool) -> None:
        self._ui_state.show_hint = show

    def set_show_answer(self, show: bool) -> None:
        self._ui_state.show_answer = show

    def get_ui_state(self) -> UIState:
        return UIState(show_hint=self._ui_state.show_hint, show_answer=self._ui_state.show_answer)

    def snapshot(self, setting: QuizSetting) -> dict[str, object]:
        """Full state as pushed to clients."""
        return {
            "questionData": self._question_data.to_dict() if self._question_data else None,
            "isActive": self._is_active,
            "players": self._registry.snapshot(),
            "pressOrder": list(self._press_order),
            "showHint": self._ui_state.show_hint,
            "showAnswer": self._ui_state.show_answer,
            "setting": setting.to_dict(),
        }
