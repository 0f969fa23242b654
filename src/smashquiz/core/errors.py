"""Errors raised by game actions.

All of them are recoverable: an action that raises leaves the registry and
the history log exactly as they were.
"""

from __future__ import annotations


class SmashQuizError(Exception):
    """Base class for rejected game actions."""


class TeamNotFound(SmashQuizError):
    """Raised when an action names a team that is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Team named {name!r} not found")
        self.name = name


class TeamNotActive(SmashQuizError):
    """Raised when an eliminated team tries to answer."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Team named {name!r} is not active")
        self.name = name


class NoMoreUndo(SmashQuizError):
    def __init__(self) -> None:
        super().__init__("No more undo")


class NoMoreRedo(SmashQuizError):
    def __init__(self) -> None:
        super().__init__("No more redo")


class RecordNotFound(SmashQuizError):
    """Raised when jumping to a history index that was never recorded."""

    def __init__(self, index: int) -> None:
        super().__init__(f"History record {index} not found")
        self.index = index


class SessionNotInitialized(SmashQuizError):
    def __init__(self) -> None:
        super().__init__("Game not initialized")
