"""Payload schemas for actions received over the WebSocket."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr
from pydantic.alias_generators import to_camel

from buzzer_app.core.models import QuizSettingUpdate


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, extra="ignore", frozen=True)


class SetQuestionPayload(_Payload):
    """Payload schema for starting a question."""

    question: StrictStr
    answer: StrictStr
    hint: StrictStr | None = None


class PlayerNamePayload(_Payload):
    player_id: StrictInt
    name: StrictStr


class PressButtonPayload(_Payload):
    """Payload schema for a buzz. Older buzzer pages send ``buttonId`` instead of ``playerId``."""

    player_id: StrictInt = Field(validation_alias=AliasChoices("playerId", "buttonId"))
    timestamp: StrictInt | StrictFloat | None = None


class AdjustScorePayload(_Payload):
    player_id: StrictInt
    delta: StrictInt


class SetScorePayload(_Payload):
    player_id: StrictInt
    score: StrictInt


class QuizSettingPayload(_Payload):
    """Partial quiz setting; omitted fields keep their current value."""

    model_config = ConfigDict(alias_generator=to_camel, extra="forbid", frozen=True)

    max_players: StrictInt | None = None
    hint_time: StrictInt | None = None
    answer_time: StrictInt | None = None
    correct_points: StrictInt | None = None
    incorrect_points: StrictInt | None = None
    answer_break_penalty: StrictInt | None = None

    def to_update(self) -> QuizSettingUpdate:
        return QuizSettingUpdate(**self.model_dump(exclude_none=True))
