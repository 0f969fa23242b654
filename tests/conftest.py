"""Shared test fixtures."""

import random

import pytest
from httpx import ASGITransport, AsyncClient

from smashquiz.config import Settings
from smashquiz.core.session import SessionController
from smashquiz.main import create_app
from smashquiz.models.rules import Damage, Rule, StockRule


@pytest.fixture
def settings() -> Settings:
    """Test settings with a fixed seed so rolls are reproducible."""
    return Settings(smashquiz_env="development", smashquiz_rng_seed=1234)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def fixed_rule() -> Rule:
    """Rule with zero spread: correct answers deal exactly 0.1, wrong ones 0.2."""
    return Rule(
        damage_if_correct=Damage(mean=0.1, std_dev=0.0),
        damage_if_incorrect=Damage(mean=0.2, std_dev=0.0),
    )


@pytest.fixture
def stock_rule() -> Rule:
    """One life each, no stealing."""
    return Rule(
        damage_if_correct=Damage(mean=0.1, std_dev=0.0),
        damage_if_incorrect=Damage(mean=0.2, std_dev=0.0),
        stock=StockRule(count=1, can_steal=False),
    )


@pytest.fixture
def controller() -> SessionController:
    return SessionController(rng=random.Random(7))


@pytest.fixture
async def client(settings: Settings):
    """Async HTTP client bound to a fresh app, plus the app for state access."""
    app = create_app(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c, app
