"""Reading and writing question sets in a plain-text format.

File format (repeat blocks separated by blank lines or '---'):

    Q: Question text. Additional lines until the next marker belong to the
       question.
    A: Answer text (may also continue on following lines)
    HINT: Optional hint

Example:

    Q: Which planet has the shortest year?
    A: Mercury
    HINT: It is the closest to the sun.

    ---

    Q: What is the chemical symbol for gold?
    A: Au

A continuation line starting with a backslash is taken literally, minus the
backslash: it never starts a section or a block, and a lone backslash is an
empty line. Saving escapes every continuation line that would otherwise be
read differently, so saved sets load back unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from buzzer_app.core.models import QuestionData


class QuestionSetImportError(Exception):
    """Raised when a question set file cannot be parsed."""


@dataclass(slots=True)
class ImportedQuestionSet:
    """Container for an imported file and its questions."""

    source_path: Path
    questions: list[QuestionData]


_MARKERS = {"Q:": "question", "A:": "answer", "HINT:": "hint"}
_ESCAPE = "\\"
_BLOCK_SEPARATOR = "---"


def load_question_set_from_file(file_path: Path) -> ImportedQuestionSet:
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise QuestionSetImportError(f"Could not read question file {file_path}: {exc}") from exc
    questions = parse_question_set(text)
    if not questions:
        raise QuestionSetImportError("Question file did not contain any questions.")
    return ImportedQuestionSet(source_path=file_path, questions=questions)


def save_question_set_to_file(file_path: Path, questions: list[QuestionData]) -> None:
    """Persist ``questions`` in the format read by ``load_question_set_from_file``."""
    if not questions:
        raise ValueError("Cannot export an empty question set.")

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    blocks = [_serialize_question(question) for question in questions]
    file_path.write_text("\n\n---\n\n".join(blocks) + "\n", encoding="utf-8")


def parse_question_set(text: str) -> list[QuestionData]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == _BLOCK_SEPARATOR:
            if current_block:
                blocks.append("\n".join(current_block))
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block))
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block))

    return [_parse_block(block) for block in blocks]


def _parse_block(block: str) -> QuestionData:
    sections: dict[str, list[str]] = {}
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if line.startswith(_ESCAPE):
            if current_section is None:
                raise QuestionSetImportError(f"Encountered text outside of a known section: '{line}'.")
            sections[current_section].append(raw_line.lstrip()[1:])
            continue
        marker = _match_marker(line)
        if marker is not None:
            current_section = _MARKERS[marker]
            if current_section in sections:
                raise QuestionSetImportError(f"Duplicate '{marker}' line in block: '{line}'.")
            sections[current_section] = [line[len(marker):].strip()]
            continue
        if current_section is None:
            raise QuestionSetImportError(f"Encountered text outside of a known section: '{line}'.")
        sections[current_section].append(line)

    question = "\n".join(sections.get("question", [])).strip()
    if not question:
        raise QuestionSetImportError("Question text missing (Q: ...)")
    answer = "\n".join(sections.get("answer", [])).strip()
    if not answer:
        raise QuestionSetImportError(f"Answer missing for question '{question}' (A: ...)")
    hint = "\n".join(sections.get("hint", [])).strip() or None

    return QuestionData(question=question, answer=answer, hint=hint)


def _match_marker(line: str) -> str | None:
    upper = line.upper()
    for marker in _MARKERS:
        if upper.startswith(marker):
            return marker
    return None


def _serialize_question(question: QuestionData) -> str:
    lines: list[str] = []
    _append_section(lines, "Q", question.question)
    _append_section(lines, "A", question.answer)
    if question.hint:
        _append_section(lines, "HINT", question.hint)
    return "\n".join(lines)


def _append_section(lines: list[str], marker: str, text: str) -> None:
    text_lines = text.splitlines() or [text]
    lines.append(f"{marker}: {text_lines[0]}")
    lines.extend(_ESCAPE + line if _needs_escape(line) else line for line in text_lines[1:])


def _needs_escape(line: str) -> bool:
    stripped = line.strip()
    return (
        stripped != line
        or not stripped
        or stripped == _BLOCK_SEPARATOR
        or stripped.startswith(_ESCAPE)
        or _match_marker(stripped) is not None
    )
