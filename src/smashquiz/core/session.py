"""Session controller, the one place game actions enter the engine.

Holds the live game (registry + rule) and its history log, each behind its
own lock. An action takes the game lock, then the log lock if it needs it,
runs to completion without awaiting anything, and returns the Message to
broadcast. Broadcasting is the caller's job and happens after the locks are
released, so a failed broadcast never rolls back a committed action.

Usage:
    controller = SessionController(rng=random.Random(42))
    controller.initialize(["Red", "Blue", "Green"])
    msg = controller.smash("Red", correct=True)
    await bus.publish(msg.to_wire())
"""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Callable, Sequence

from pydantic import BaseModel

from smashquiz.core.errors import SessionNotInitialized
from smashquiz.core.game_manager import GameManager
from smashquiz.core.history import Log
from smashquiz.models.events import (
    Actor,
    AnswerEvent,
    InitializeEvent,
    Message,
    ResetEvent,
    SyncEvent,
    UiConfig,
    UiUpdateEvent,
)
from smashquiz.models.rules import DEFAULT_RULE, Rule
from smashquiz.models.team import copy_teams

logger = logging.getLogger(__name__)


class HistorySummary(BaseModel):
    """Read-only view of the history tree for an operator screen."""

    cursor: int
    parents: list[int]  # parents[i] is the record committed before record i
    redo_candidates: list[int]


class SessionController:
    """Owns the live game and its log for one running event."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._game: GameManager[Rule] | None = None
        self._log: Log | None = None
        self._game_lock = threading.Lock()
        self._log_lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._game is not None

    def _require_game(self) -> GameManager[Rule]:
        if self._game is None:
            raise SessionNotInitialized
        return self._game

    def _require_log(self) -> Log:
        if self._log is None:
            raise SessionNotInitialized
        return self._log

    def initialize(self, names: Sequence[str], rule: Rule | None = None) -> Message:
        """Start a new game, replacing any running game and its history."""
        rule = rule or DEFAULT_RULE
        game = GameManager.new(rule, names)
        with self._game_lock, self._log_lock:
            self._game = game
            self._log = Log.new(game)
            update = copy_teams(game.teams)
        logger.info("game_initialized teams=%d stock=%s", len(update), rule.stock is not None)
        return Message(update=update, event=InitializeEvent(rule=rule))

    def _answer(self, actor: Actor, attacker: str, correct: bool) -> Message:
        with self._game_lock:
            game = self._require_game()
            if actor is Actor.SMASH:
                update = game.smash(attacker, correct, self._rng)
            else:
                update = game.damage(attacker, correct, self._rng)
            with self._log_lock:
                if self._log is None:
                    self._log = Log.new(game)
                else:
                    self._log.commit(game)
        logger.info(
            "answer actor=%s attacker=%s correct=%s changed=%d",
            actor.value,
            attacker,
            correct,
            len(update),
        )
        return Message(update=update, event=AnswerEvent(actor_type=actor, success=correct))

    def damage(self, attacker: str, correct: bool) -> Message:
        return self._answer(Actor.DAMAGE, attacker, correct)

    def smash(self, attacker: str, correct: bool) -> Message:
        return self._answer(Actor.SMASH, attacker, correct)

    def _restore(self, label: str, move: Callable[[Log], GameManager[Rule]]) -> Message:
        """Move the log cursor and make the selected record the live game."""
        with self._game_lock, self._log_lock:
            log = self._require_log()
            restored = move(log)
            self._game = restored
            update = copy_teams(restored.teams)
            cursor = log.cursor
        logger.info("history_%s cursor=%d", label, cursor)
        return Message(update=update, event=SyncEvent(rule=restored.rule))

    def undo(self) -> Message:
        return self._restore("undo", Log.undo)

    def redo(self) -> Message:
        return self._restore("redo", Log.redo)

    def goto(self, index: int) -> Message:
        return self._restore("goto", lambda log: log.goto(index))

    def sync(self) -> Message:
        """Full current state, for a display surface that just connected."""
        with self._game_lock:
            game = self._require_game()
            update = copy_teams(game.teams)
            rule = game.rule
        return Message(update=update, event=SyncEvent(rule=rule))

    def reset(self) -> Message:
        with self._game_lock, self._log_lock:
            self._game = None
            self._log = None
        logger.info("game_reset")
        return Message(event=ResetEvent())

    def ui_update(self, config: UiConfig) -> Message:
        return Message(event=UiUpdateEvent(config=config))

    def history(self) -> HistorySummary:
        with self._game_lock, self._log_lock:
            log = self._require_log()
            return HistorySummary(
                cursor=log.cursor,
                parents=[record.before for record in log.records],
                redo_candidates=log.redo_candidates(),
            )
