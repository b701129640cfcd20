"""Service for stepping through a prepared set of questions."""

from __future__ import annotations

from buzzer_app.core.models import QuestionData


class QuestionBank:
    """Ordered question set with a cursor pointing at the last question served."""

    def __init__(self) -> None:
        self._questions: list[QuestionData] = []
        self._position: int = -1

    def load(self, questions: list[QuestionData]) -> None:
        """Replace the current set and rewind to the start."""
        if not questions:
            raise ValueError("Question set must contain at least one question.")
        self._questions = [self._prepare_question(q) for q in questions]
        self._position = -1

    def get_questions(self) -> list[QuestionData]:
        return list(self._questions)

    @property
    def position(self) -> int:
        return self._position

    @property
    def remaining(self) -> int:
        return max(0, len(self._questions) - (self._position + 1))

    def next_question(self) -> QuestionData | None:
        if self._position + 1 >= len(self._questions):
            return None
        self._position += 1
        return self._questions[self._position]

    def reset(self) -> None:
        """Rewind so the next call to ``next_question`` serves the first question again."""
        self._position = -1

    @staticmethod
    def _prepare_question(question: QuestionData) -> QuestionData:
        cleaned_question = question.question.strip()
        if not cleaned_question:
            raise ValueError("Question text must not be empty.")
        cleaned_answer = question.answer.strip()
        if not cleaned_answer:
            raise ValueError("Answer text must not be empty.")
        hint = question.hint.strip() if question.hint else None
        return QuestionData(question=cleaned_question, answer=cleaned_answer, hint=hint or None)
