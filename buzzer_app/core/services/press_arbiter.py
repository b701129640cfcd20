"""Service deciding which button presses count and in what order.

Precedence is the order in which presses reach ``register_press``. The
timestamp reported by a client or controller is carried through for display
and sound cues but never used for ranking, since buzzer devices do not share a
clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging

from buzzer_app.core.services.player_registry import PlayerRegistry
from buzzer_app.core.services.quiz_session import QuizSession

logger = logging.getLogger(__name__)


class PressRejection(str, Enum):
    INACTIVE = "inactive"
    UNKNOWN_PLAYER = "unknown_player"
    DUPLICATE = "duplicate"


@dataclass(frozen=True, slots=True)
class PressOutcome:
    """Result of one press attempt."""

    player_id: int
    timestamp: int | float | None
    order: int | None = None
    rejection: PressRejection | None = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


class PressArbiter:
    """Turns press events into a strict, gap-free ranking."""

    def __init__(self, session: QuizSession, registry: PlayerRegistry) -> None:
        self._session = session
        self._registry = registry

    def register_press(
        self,
        player_id: int,
        timestamp: int | float | None = None,
    ) -> PressOutcome:
        if not self._session.is_active():
            logger.debug("Ignoring press from player %s: no active question", player_id)
            return PressOutcome(player_id, timestamp, rejection=PressRejection.INACTIVE)

        player = self._registry.get(player_id)
        if player is None:
            logger.warning("Ignoring press from unknown player %r", player_id)
            return PressOutcome(player_id, timestamp, rejection=PressRejection.UNKNOWN_PLAYER)

        if player.pressed:
            logger.debug("Player %s already pressed (order %s)", player_id, player.order)
            return PressOutcome(player_id, timestamp, rejection=PressRejection.DUPLICATE)

        order = self._session.enqueue(player)
        logger.info("Player %s (%s) pressed, order %d", player.id, player.name, order)
        return PressOutcome(player_id, timestamp, order=order)
