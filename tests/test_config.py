"""Tests for application configuration."""

import pytest
from pydantic import ValidationError

from smashquiz.config import Settings
from smashquiz.main import create_app


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.smashquiz_env == "development"
        assert settings.smashquiz_rng_seed is None
        assert settings.default_ui_config().font_size == 12.0

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("SMASHQUIZ_RNG_SEED", "77")
        monkeypatch.setenv("SMASHQUIZ_LOG_LEVEL", "debug")
        settings = Settings()
        assert settings.smashquiz_rng_seed == 77
        assert settings.smashquiz_log_level == "debug"

    def test_font_size_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationError, match="SMASHQUIZ_DEFAULT_FONT_SIZE"):
            Settings(smashquiz_default_font_size=31.0)

    def test_zero_sse_connections_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(smashquiz_max_sse_connections=0)


class TestCreateApp:
    def test_docs_hidden_in_production(self) -> None:
        app = create_app(Settings(smashquiz_env="production"))
        assert app.docs_url is None

    def test_docs_available_in_development(self) -> None:
        app = create_app(Settings(smashquiz_env="development"))
        assert app.docs_url == "/docs"

    def test_seed_makes_rolls_reproducible(self) -> None:
        settings = Settings(smashquiz_rng_seed=3)
        first = create_app(settings).state.controller
        second = create_app(settings).state.controller
        for controller in (first, second):
            controller.initialize(["A", "B", "C"])
        assert first.damage("A", correct=True) == second.damage("A", correct=True)
