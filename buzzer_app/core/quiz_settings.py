"""Validated partial updates of the quiz scoring policy."""

from __future__ import annotations

from dataclasses import fields, replace

from buzzer_app.core.models import QuizSetting, QuizSettingUpdate


class QuizSettingError(ValueError):
    """Raised when a settings update contains an invalid field."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(f"{field_name}: {message}")
        self.field_name = field_name


_NON_NEGATIVE_FIELDS = frozenset({"hint_time", "answer_time", "answer_break_penalty"})


def merge_quiz_setting(
    current: QuizSetting,
    update: QuizSettingUpdate,
    roster_size: int,
) -> QuizSetting:
    """Return ``current`` with every non-``None`` field of ``update`` applied.

    All fields are validated before anything is applied, so a rejected update
    leaves the caller's setting untouched.
    """
    changes: dict[str, int] = {}
    for update_field in fields(update):
        value = getattr(update, update_field.name)
        if value is None:
            continue
        _validate_field(update_field.name, value, roster_size)
        changes[update_field.name] = value
    if not changes:
        return current
    return replace(current, **changes)


def _validate_field(name: str, value: object, roster_size: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise QuizSettingError(name, "must be an integer")
    if name == "max_players" and not 1 <= value <= roster_size:
        raise QuizSettingError(name, f"must be between 1 and {roster_size}")
    if name in _NON_NEGATIVE_FIELDS and value < 0:
        raise QuizSettingError(name, "must not be negative")
