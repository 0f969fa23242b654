"""Game manager: applies one damage or smash action to the team registry.

The manager is generic over the rule it is given: anything satisfying
``RuleSystem`` can drive it. Each action either completes and returns the
states it changed, or raises and leaves the registry untouched.

Usage:
    manager = GameManager.new(DEFAULT_RULE, ["A", "B", "C"])
    changed = manager.smash("A", correct=True, rng=random.Random(7))
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from typing import Generic, Protocol, TypeVar

from smashquiz.core.errors import TeamNotActive, TeamNotFound
from smashquiz.models.team import Teams, TeamState, copy_teams

logger = logging.getLogger(__name__)


class RuleSystem(Protocol):
    """Capabilities the manager needs from a rule configuration."""

    def new_state(self, name: str) -> TeamState: ...

    def apply_damage_if_correct(self, teams: Teams, rng: random.Random) -> None: ...

    def apply_damage_if_incorrect(self, attacker: TeamState, rng: random.Random) -> None: ...

    def do_smash(
        self, attacker: TeamState, victims: Teams, targeted: int | None = None
    ) -> None: ...

    def judge_smash_success(
        self, attacker: TeamState, candidate: TeamState, rng: random.Random
    ) -> bool: ...

    def team_is_active(self, state: TeamState) -> bool: ...


RuleT = TypeVar("RuleT", bound=RuleSystem)


class GameManager(Generic[RuleT]):
    """The live registry plus the rule captured when the game started."""

    def __init__(self, teams: Teams, rule: RuleT) -> None:
        self.teams = teams
        self.rule = rule

    @classmethod
    def new(cls, rule: RuleT, names: Iterable[str]) -> GameManager[RuleT]:
        """Create a registry with one zeroed state per team name."""
        return cls({name: rule.new_state(name) for name in names}, rule)

    def snapshot(self) -> GameManager[RuleT]:
        """Independent copy of registry and rule."""
        return GameManager(copy_teams(self.teams), self.rule)

    def _take_attacker(self, attacker: str) -> TeamState:
        """Remove the attacker from the registry, or raise without touching it."""
        state = self.teams.pop(attacker, None)
        if state is None:
            raise TeamNotFound(attacker)
        if not self.rule.team_is_active(state):
            self.teams[attacker] = state
            raise TeamNotActive(attacker)
        return state

    def damage(self, attacker: str, correct: bool, rng: random.Random) -> Teams:
        """Resolve a damage answer.

        Correct: every other active team takes damage; all other teams are
        reported. Incorrect: the attacker takes recoil; only it is reported.
        """
        attacker_state = self._take_attacker(attacker)
        if correct:
            self.rule.apply_damage_if_correct(self.teams, rng)
            update = copy_teams(self.teams)
        else:
            self.rule.apply_damage_if_incorrect(attacker_state, rng)
            update = {attacker: attacker_state.model_copy()}
        self.teams[attacker] = attacker_state
        logger.debug("damage attacker=%s correct=%s changed=%d", attacker, correct, len(update))
        return update

    def smash(self, attacker: str, correct: bool, rng: random.Random) -> Teams:
        """Resolve a smash answer.

        Correct: each other team is judged independently; the hits are
        smashed. Only the attacker and the active hits are reported. Incorrect:
        same recoil as a wrong damage answer.
        """
        attacker_state = self._take_attacker(attacker)
        if correct:
            # Judge every candidate before anything is mutated. Victims are the
            # registry's own state objects, so do_smash updates them in place.
            victims: Teams = {
                name: state
                for name, state in self.teams.items()
                if self.rule.judge_smash_success(attacker_state, state, rng)
            }
            # Eliminated victims stay frozen, so they are not reported.
            changed = [name for name, state in victims.items() if self.rule.team_is_active(state)]
            self.rule.do_smash(attacker_state, victims, targeted=len(self.teams))
            update = {name: victims[name].model_copy() for name in changed}
            update[attacker] = attacker_state.model_copy()
            logger.debug("smash attacker=%s victims=%s", attacker, sorted(victims))
        else:
            self.rule.apply_damage_if_incorrect(attacker_state, rng)
            update = {attacker: attacker_state.model_copy()}
        self.teams[attacker] = attacker_state
        return update
