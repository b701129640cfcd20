"""Shared fixtures for the buzzer tests."""

from __future__ import annotations

import pytest

from buzzer_app.core.models import QuestionData, QuizSetting
from buzzer_app.core.quiz_manager import QuizManager
from buzzer_app.core.services.player_registry import PlayerRegistry
from buzzer_app.core.services.quiz_session import QuizSession


class MockChannel:
    """Lightweight stand-in for a FastAPI ``WebSocket``."""

    def __init__(self, fail: bool = False) -> None:
        self.sent_messages: list[dict] = []
        self.fail = fail

    async def send_json(self, data: dict) -> None:
        if self.fail:
            raise ConnectionError("socket closed")
        self.sent_messages.append(data)

    def events(self) -> list[str]:
        return [message["event"] for message in self.sent_messages]

    def last(self, event: str) -> dict | None:
        for message in reversed(self.sent_messages):
            if message["event"] == event:
                return message["data"]
        return None


@pytest.fixture
def question() -> QuestionData:
    return QuestionData(question="Capital of France?", answer="Paris", hint="Eiffel")


@pytest.fixture
def channel_factory():
    return MockChannel


@pytest.fixture
def registry() -> PlayerRegistry:
    return PlayerRegistry(3)


@pytest.fixture
def session(registry: PlayerRegistry) -> QuizSession:
    return QuizSession(registry)


@pytest.fixture
def setting() -> QuizSetting:
    return QuizSetting(max_players=3, correct_points=10, incorrect_points=-5)


@pytest.fixture
def manager() -> QuizManager:
    return QuizManager(roster_size=3, setting=QuizSetting(max_players=3, correct_points=10, incorrect_points=-5))
