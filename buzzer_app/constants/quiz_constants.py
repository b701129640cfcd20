"""Quiz-related defaults shared across the core and the server."""

DEFAULT_ROSTER_SIZE: int = 6
DEFAULT_PLAYER_NAME_TEMPLATE: str = "Player {number}"

DEFAULT_HINT_TIME_SECONDS: int = 10
DEFAULT_ANSWER_TIME_SECONDS: int = 20
DEFAULT_CORRECT_POINTS: int = 10
DEFAULT_INCORRECT_POINTS: int = -5
DEFAULT_ANSWER_BREAK_PENALTY: int = 1
