"""Tests for GameManager damage and smash resolution."""

import random

import pytest

from smashquiz.core.errors import TeamNotActive, TeamNotFound
from smashquiz.core.game_manager import GameManager
from smashquiz.models.rules import DEFAULT_RULE, Rule
from smashquiz.models.team import TeamState, copy_teams


def _game(rule: Rule, names: list[str] | None = None) -> GameManager[Rule]:
    return GameManager.new(rule, names or ["A", "B", "C", "D"])


class TestNew:
    def test_one_zeroed_state_per_name(self):
        game = _game(DEFAULT_RULE, ["Red", "Blue"])
        assert set(game.teams) == {"Red", "Blue"}
        assert all(s.damage == 0 and s.up == 0 and s.down == 0 for s in game.teams.values())
        assert game.teams["Red"].name == "Red"

    def test_snapshot_is_independent(self):
        game = _game(DEFAULT_RULE)
        snap = game.snapshot()
        game.teams["A"].damage = 0.9
        assert snap.teams["A"].damage == 0.0
        assert snap.rule == game.rule


class TestDamage:
    def test_incorrect_changes_only_attacker(self, fixed_rule, rng):
        game = _game(fixed_rule)
        game.teams["B"].damage = 0.3
        before = copy_teams(game.teams)

        update = game.damage("A", correct=False, rng=rng)

        assert set(update) == {"A"}
        assert game.teams["A"].damage == pytest.approx(0.2)
        for name in ("B", "C", "D"):
            assert game.teams[name] == before[name]

    def test_correct_damages_everyone_else(self, fixed_rule, rng):
        game = _game(fixed_rule)

        update = game.damage("A", correct=True, rng=rng)

        assert set(update) == {"B", "C", "D"}
        assert game.teams["A"].damage == 0.0
        for name in ("B", "C", "D"):
            assert game.teams[name].damage == pytest.approx(0.1)
            assert update[name].damage == pytest.approx(0.1)

    def test_correct_never_touches_counters(self, rng):
        game = _game(DEFAULT_RULE)
        for _ in range(20):
            game.damage("B", correct=True, rng=rng)
        assert all(s.up == 0 and s.down == 0 for s in game.teams.values())
        assert game.teams["B"].damage == 0.0

    def test_two_team_example(self, rng):
        game = _game(DEFAULT_RULE, ["A", "B"])
        game.damage("A", correct=False, rng=rng)
        assert game.teams["B"].damage == 0.0
        assert game.teams["A"].damage >= 0.0

        a_before = game.teams["A"].damage
        game.damage("A", correct=True, rng=rng)
        assert game.teams["A"].damage == a_before
        assert game.teams["B"].damage >= 0.0

    def test_correct_skips_eliminated_teams(self, stock_rule, rng):
        game = _game(stock_rule)
        game.teams["C"].down = 1

        update = game.damage("A", correct=True, rng=rng)

        assert game.teams["C"].damage == 0.0
        assert "C" in update  # reported as part of the remaining registry

    def test_update_is_a_copy(self, fixed_rule, rng):
        game = _game(fixed_rule)
        update = game.damage("A", correct=False, rng=rng)
        update["A"].damage = 99.0
        assert game.teams["A"].damage == pytest.approx(0.2)


class TestSmash:
    def test_up_counts_every_other_team(self, fixed_rule, rng):
        game = _game(fixed_rule)
        game.teams["B"].damage = 1.0  # certain hit
        # C and D have zero damage and cannot be hit

        update = game.smash("A", correct=True, rng=rng)

        assert game.teams["A"].up == 3
        assert set(update) == {"A", "B"}
        assert game.teams["B"].down == 1
        assert game.teams["B"].damage == 0.0
        assert game.teams["C"].down == 0

    def test_no_hits_still_credits_attempt(self, fixed_rule, rng):
        game = _game(fixed_rule)
        update = game.smash("A", correct=True, rng=rng)
        assert set(update) == {"A"}
        assert update["A"].up == 3

    def test_non_victims_unchanged(self, fixed_rule, rng):
        game = _game(fixed_rule)
        game.teams["B"].damage = 1.0
        game.teams["C"].damage = 0.0
        game.teams["D"].damage = 0.0
        before = copy_teams(game.teams)

        game.smash("A", correct=True, rng=rng)

        assert game.teams["C"] == before["C"]
        assert game.teams["D"] == before["D"]

    def test_incorrect_is_recoil_only(self, fixed_rule, rng):
        game = _game(fixed_rule)
        game.teams["B"].damage = 1.0
        update = game.smash("A", correct=False, rng=rng)
        assert set(update) == {"A"}
        assert game.teams["A"].damage == pytest.approx(0.2)
        assert game.teams["A"].up == 0
        assert game.teams["B"].down == 0

    def test_every_team_kept(self, fixed_rule):
        game = _game(fixed_rule)
        rng = random.Random(11)
        for name in ("B", "C", "D"):
            game.teams[name].damage = 0.5
        for attacker in ("A", "B", "C", "D", "A"):
            game.smash(attacker, correct=True, rng=rng)
        assert set(game.teams) == {"A", "B", "C", "D"}
        assert all(name == state.name for name, state in game.teams.items())

    def test_eliminated_team_never_changes_when_targeted(self, stock_rule, rng):
        game = _game(stock_rule)
        game.teams["B"] = TeamState(name="B", damage=1.0, down=1)

        update = game.smash("A", correct=True, rng=rng)

        assert game.teams["B"].down == 1
        assert game.teams["B"].damage == 1.0
        assert "B" not in update
        assert "A" in update


class TestFailures:
    def test_unknown_team(self, fixed_rule, rng):
        game = _game(fixed_rule)
        before = copy_teams(game.teams)
        with pytest.raises(TeamNotFound, match="'Z'"):
            game.damage("Z", correct=True, rng=rng)
        with pytest.raises(TeamNotFound):
            game.smash("Z", correct=True, rng=rng)
        assert game.teams == before

    def test_eliminated_attacker_rejected(self, stock_rule, rng):
        game = _game(stock_rule, ["A", "B"])
        game.teams["A"].down = 1
        before = copy_teams(game.teams)

        with pytest.raises(TeamNotActive, match="not active"):
            game.damage("A", correct=True, rng=rng)
        with pytest.raises(TeamNotActive):
            game.smash("A", correct=False, rng=rng)

        assert game.teams == before
        assert "A" in game.teams
