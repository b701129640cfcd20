"""Service applying the host's correct/incorrect verdicts."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from buzzer_app.core.models import QuizSetting
from buzzer_app.core.services.player_registry import PlayerRegistry
from buzzer_app.core.services.quiz_session import QuizSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class JudgmentResult:
    """What a verdict did to the front-runner."""

    player_id: int
    correct: bool
    points: int
    new_score: int


class JudgmentEngine:
    """Scores the player at the front of the press queue."""

    def __init__(self, session: QuizSession, registry: PlayerRegistry) -> None:
        self._session = session
        self._registry = registry

    def judge(self, correct: bool, setting: QuizSetting) -> JudgmentResult | None:
        """Score the front-runner.

        A correct answer ends the question for everyone. An incorrect answer
        only removes the front-runner, so the next queued player moves up and
        the question stays open. Returns ``None`` when nobody has pressed.
        """
        player_id = self._session.front_player_id()
        if player_id is None:
            logger.warning("Judgment requested with an empty press queue; ignoring")
            return None

        player = self._registry.get(player_id)
        if player is None:  # pragma: no cover - the queue only ever holds roster ids
            raise RuntimeError(f"Queued player {player_id} is missing from the roster.")

        points = setting.correct_points if correct else setting.incorrect_points
        player.score += points

        if correct:
            self._session.end_quiz()
            logger.info("Player %s answered correctly (%+d, score %d)", player_id, points, player.score)
        else:
            self._session.retract_front()
            logger.info("Player %s answered incorrectly (%+d, score %d)", player_id, points, player.score)

        return JudgmentResult(
            player_id=player_id,
            correct=correct,
            points=points,
            new_score=player.score,
        )
