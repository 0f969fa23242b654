"""Branching undo/redo history.

Every committed action appends a record that remembers which record was
current when it was made (``before``). The records form a tree rooted at
index 0; undo walks toward the root, redo walks to the newest child.
Nothing is ever removed, so undoing and then acting again starts a new
branch instead of discarding the old one.

    0 ── 1 ── 2
          └── 3      undo from 2 → 1, commit → 3, redo from 1 → 3
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from smashquiz.core.errors import NoMoreRedo, NoMoreUndo, RecordNotFound
from smashquiz.core.game_manager import GameManager
from smashquiz.models.rules import Rule
from smashquiz.models.team import Teams, copy_teams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogRecord:
    """Registry contents after one action, plus the cursor it was committed from."""

    states: Teams
    before: int


@dataclass
class Log:
    """Append-only record arena with a cursor naming the live record."""

    rule: Rule
    records: list[LogRecord] = field(default_factory=list)
    cursor: int = 0

    @classmethod
    def new(cls, manager: GameManager[Rule]) -> Log:
        """Start a log whose root record is the manager's current registry."""
        root = LogRecord(states=copy_teams(manager.teams), before=0)
        return cls(rule=manager.rule, records=[root], cursor=0)

    def commit(self, manager: GameManager[Rule]) -> int:
        """Record the manager's registry as a child of the current record.

        Returns the new record's index, which becomes the cursor.
        """
        self.records.append(LogRecord(states=copy_teams(manager.teams), before=self.cursor))
        self.cursor = len(self.records) - 1
        logger.debug("history_commit index=%d before=%d", self.cursor, self.records[-1].before)
        return self.cursor

    def current(self) -> GameManager[Rule]:
        """Rebuild a live manager from the record under the cursor."""
        return GameManager(copy_teams(self.records[self.cursor].states), self.rule)

    def goto(self, index: int) -> GameManager[Rule]:
        if not 0 <= index < len(self.records):
            raise RecordNotFound(index)
        self.cursor = index
        return self.current()

    def undo(self) -> GameManager[Rule]:
        """Move to the parent record. The root's self-reference is not a parent."""
        parent = self.records[self.cursor].before
        if parent == self.cursor:
            raise NoMoreUndo
        return self.goto(parent)

    def redo_candidates(self) -> list[int]:
        """Indices of the records committed directly from the current one."""
        return [
            index
            for index, record in enumerate(self.records)
            if record.before == self.cursor and index != self.cursor
        ]

    def redo(self) -> GameManager[Rule]:
        """Move to the most recently committed child of the current record."""
        candidates = self.redo_candidates()
        if not candidates:
            raise NoMoreRedo
        return self.goto(max(candidates))
