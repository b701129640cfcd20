"""Static metadata describing QuizBuzzer."""

APP_NAME = "QuizBuzzer"
APP_VERSION = "0.1"
