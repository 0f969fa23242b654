"""Rules: how answers turn into damage and smashes.

The central model. Consumed by the game manager, the history log, and the API.
A Rule is fixed for the life of a game; changing it means re-initializing.
"""

from __future__ import annotations

import random

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from smashquiz.models.team import Teams, TeamState

_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel, populate_by_name=True, frozen=True, allow_inf_nan=False
)


class Damage(BaseModel):
    """Normal distribution of damage, optionally clamped to [min, max]."""

    model_config = _WIRE_CONFIG

    mean: float
    std_dev: float = Field(ge=0.0)
    max: float | None = None
    min: float | None = None

    def sample(self, rng: random.Random) -> float:
        """Draw one clamped damage value."""
        value = rng.gauss(self.mean, self.std_dev)
        if self.max is not None and value > self.max:
            return self.max
        if self.min is not None and value < self.min:
            return self.min
        return value

    def apply(self, hp: float, rng: random.Random) -> float:
        """Return ``hp`` plus one sampled amount."""
        return hp + self.sample(rng)


class StockRule(BaseModel):
    """Lives per team. A team with no lives left is out of the game."""

    model_config = _WIRE_CONFIG

    count: int = Field(ge=0)
    can_steal: bool = False  # each successful smash grants the attacker a life


class Rule(BaseModel):
    """Damage models for both answer outcomes plus the optional stock policy."""

    model_config = _WIRE_CONFIG

    damage_if_correct: Damage
    damage_if_incorrect: Damage
    stock: StockRule | None = None

    def new_state(self, name: str) -> TeamState:
        return TeamState(name=name)

    def apply_damage_if_correct(self, teams: Teams, rng: random.Random) -> None:
        """Damage every active team in ``teams`` after a correct answer."""
        for state in teams.values():
            if self.team_is_active(state):
                state.damage = self.damage_if_correct.apply(state.damage, rng)

    def apply_damage_if_incorrect(self, attacker: TeamState, rng: random.Random) -> None:
        """Recoil damage on the answering team, active or not."""
        attacker.damage = self.damage_if_incorrect.apply(attacker.damage, rng)

    def do_smash(self, attacker: TeamState, victims: Teams, targeted: int | None = None) -> None:
        """Apply a smash without judging it.

        The attacker is credited with one ``up`` per targeted team, hit or
        not; ``targeted`` defaults to the number of victims. Active victims
        lose a life and their damage resets.
        """
        attacker.up += len(victims) if targeted is None else targeted
        for state in victims.values():
            if self.team_is_active(state):
                state.down += 1
                state.damage = 0.0

    def judge_smash_success(
        self, attacker: TeamState, candidate: TeamState, rng: random.Random
    ) -> bool:
        """A smash lands with probability equal to the candidate's damage."""
        return rng.random() < candidate.damage

    def team_is_active(self, state: TeamState) -> bool:
        if self.stock is None:
            return True
        lives = self.stock.count + state.up if self.stock.can_steal else self.stock.count
        return lives > state.down


DEFAULT_RULE = Rule(
    damage_if_correct=Damage(mean=0.1, std_dev=0.05, max=0.2, min=0.0),
    damage_if_incorrect=Damage(mean=0.2, std_dev=0.1, max=0.4, min=0.0),
)
