"""Service holding the fixed roster of players and their scores."""

from __future__ import annotations

from buzzer_app.constants.quiz_constants import DEFAULT_PLAYER_NAME_TEMPLATE
from buzzer_app.core.models import Player


class PlayerRegistry:
    """Ordered, fixed-size roster. Player ids run from 1 to the roster size."""

    def __init__(
        self,
        roster_size: int,
        name_template: str = DEFAULT_PLAYER_NAME_TEMPLATE,
    ) -> None:
        if roster_size < 1:
            raise ValueError("Roster must contain at least one player.")
        self._players: list[Player] = [
            Player(id=number, name=name_template.format(number=number))
            for number in range(1, roster_size + 1)
        ]

    def __len__(self) -> int:
        return len(self._players)

    def get(self, player_id: int) -> Player | None:
        """Return the player for ``player_id`` or ``None`` when it is not on the roster."""
        if isinstance(player_id, bool) or not isinstance(player_id, int):
            return None
        if not 1 <= player_id <= len(self._players):
            return None
        return self._players[player_id - 1]

    def get_players(self) -> list[Player]:
        return list(self._players)

    def update_name(self, player_id: int, name: str) -> Player | None:
        player = self.get(player_id)
        if player is not None:
            player.name = name
        return player

    def adjust_score(self, player_id: int, delta: int) -> Player | None:
        player = self.get(player_id)
        if player is not None:
            player.score += delta
        return player

    def set_score(self, player_id: int, score: int) -> Player | None:
        player = self.get(player_id)
        if player is not None:
            player.score = score
        return player

    def reset_all_scores(self) -> None:
        """Zero every score; names and press state are left alone."""
        for player in self._players:
            player.score = 0

    def clear_presses(self) -> None:
        for player in self._players:
            player.clear_press()

    def snapshot(self) -> list[dict[str, object]]:
        return [player.to_dict() for player in self._players]
