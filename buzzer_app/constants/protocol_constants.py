"""Event names exchanged with clients over the push channel."""

# Notifications pushed by the server.
EVENT_STATE: str = "state"
EVENT_BUTTON_PRESSED: str = "buttonPressed"
EVENT_CORRECT_ANSWER: str = "correctAnswer"
EVENT_INCORRECT_ANSWER: str = "incorrectAnswer"
EVENT_SCORE_UPDATED: str = "scoreUpdated"
EVENT_ERROR: str = "error"

# Actions sent by clients.
ACTION_SET_QUESTION: str = "setQuestion"
ACTION_UPDATE_PLAYER_NAME: str = "updatePlayerName"
ACTION_SET_QUIZ_SETTING: str = "setQuizSetting"
ACTION_CORRECT_ANSWER: str = "correctAnswer"
ACTION_INCORRECT_ANSWER: str = "incorrectAnswer"
ACTION_END_QUIZ: str = "endQuiz"
ACTION_PRESS_BUTTON: str = "pressButton"
ACTION_ADJUST_SCORE: str = "adjustScore"
ACTION_SET_SCORE: str = "setScore"
ACTION_RESET_ALL_SCORES: str = "resetAllScores"
ACTION_SET_SHOW_HINT: str = "setShowHint"
ACTION_SET_SHOW_ANSWER: str = "setShowAnswer"
ACTION_NEXT_QUESTION: str = "nextQuestion"

ERROR_INVALID_FORMAT: str = "invalid_format"
ERROR_UNKNOWN_ACTION: str = "unknown_action"
ERROR_INVALID_PAYLOAD: str = "invalid_payload"
