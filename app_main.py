"""Application entry point for the QuizBuzzer server."""

from __future__ import annotations

import sys

from buzzer_app.core.question_set_io import QuestionSetImportError, load_question_set_from_file
from buzzer_app.core.quiz_manager import QuizManager
from buzzer_app.server.api_server import run_api_server
from buzzer_app.utils.app_settings import get_settings
from buzzer_app.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, build the quiz state and serve it until interrupted."""
    settings = get_settings()
    logger = configure_logging(settings.log_level)
    logger.info("Starting QuizBuzzer with %d players…", settings.roster_size)

    quiz_manager = QuizManager(
        roster_size=settings.roster_size,
        name_template=settings.player_name_template,
    )

    if settings.question_file is not None:
        try:
            imported = load_question_set_from_file(settings.question_file)
        except QuestionSetImportError as exc:
            logger.error("Could not load questions: %s", exc)
            sys.exit(1)
        quiz_manager.load_question_set(imported.questions)
        logger.info("Question set loaded from %s", imported.source_path)

    logger.info("WebSocket endpoint on ws://%s:%d/ws", settings.host, settings.port)
    run_api_server(quiz_manager, settings)


if __name__ == "__main__":
    main()
