"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from smashquiz.models.events import MAX_FONT_SIZE, MIN_FONT_SIZE, UiConfig


class Settings(BaseSettings):
    """SmashQuiz application configuration.

    All values can be overridden via environment variables or .env file.
    """

    # Environment
    smashquiz_env: str = "development"

    # Logging
    smashquiz_log_level: str = "INFO"

    # Randomness: set a seed to replay a rehearsal with identical rolls
    smashquiz_rng_seed: int | None = None

    # Broadcast
    smashquiz_max_sse_connections: int = Field(default=100, ge=1)
    smashquiz_sse_heartbeat_seconds: int = Field(default=15, ge=1)
    smashquiz_subscriber_queue_size: int = Field(default=100, ge=1)

    # Display
    smashquiz_default_font_size: float = 12.0

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_font_size(self) -> Settings:
        """Reject a default font size the display surfaces would refuse."""
        if not MIN_FONT_SIZE <= self.smashquiz_default_font_size <= MAX_FONT_SIZE:
            msg = (
                "SMASHQUIZ_DEFAULT_FONT_SIZE must be between "
                f"{MIN_FONT_SIZE} and {MAX_FONT_SIZE}, "
                f"got {self.smashquiz_default_font_size}"
            )
            raise ValueError(msg)
        return self

    def default_ui_config(self) -> UiConfig:
        return UiConfig(font_size=self.smashquiz_default_font_size)
