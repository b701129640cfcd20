"""Runtime configuration loaded from the environment (``BUZZER_*``) or a ``.env`` file."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from buzzer_app.constants.network_constants import (
    DEFAULT_CORS_ORIGINS,
    DEFAULT_HOST,
    DEFAULT_PORT,
    SERIAL_BAUD_RATE,
)
from buzzer_app.constants.quiz_constants import (
    DEFAULT_PLAYER_NAME_TEMPLATE,
    DEFAULT_ROSTER_SIZE,
)


class AppSettings(BaseSettings):
    """Server, roster and controller settings."""

    model_config = SettingsConfigDict(env_prefix="BUZZER_", env_file=".env", extra="ignore")

    # Server
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    # Roster
    roster_size: int = Field(default=DEFAULT_ROSTER_SIZE, ge=1)
    player_name_template: str = DEFAULT_PLAYER_NAME_TEMPLATE

    # Question bank loaded at startup
    question_file: Path | None = None

    # Serial button controller
    serial_port: str | None = None
    serial_auto_detect: bool = False
    serial_baud_rate: int = SERIAL_BAUD_RATE

    @property
    def serial_enabled(self) -> bool:
        return bool(self.serial_port) or self.serial_auto_detect


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return the process-wide settings, read once on first use."""
    return AppSettings()
