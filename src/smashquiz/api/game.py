"""Game command endpoints used by the operator console.

Every successful action returns the broadcast message and publishes it to
all display surfaces. A rejected action returns a single string ``detail``
and publishes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Body, HTTPException
from pydantic import BaseModel, field_validator

from smashquiz.api.deps import BusDep, ControllerDep, SettingsDep
from smashquiz.core.errors import (
    NoMoreRedo,
    NoMoreUndo,
    RecordNotFound,
    SessionNotInitialized,
    SmashQuizError,
    TeamNotActive,
    TeamNotFound,
)
from smashquiz.core.event_bus import EventBus
from smashquiz.core.session import HistorySummary
from smashquiz.models.events import Message, UiConfig
from smashquiz.models.rules import Rule

router = APIRouter(prefix="/api/game", tags=["game"])
logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[SmashQuizError], int] = {
    TeamNotFound: 404,
    RecordNotFound: 404,
    TeamNotActive: 409,
    NoMoreUndo: 409,
    NoMoreRedo: 409,
    SessionNotInitialized: 409,
}


class InitializeRequest(BaseModel):
    """Team names in display order, plus an optional rule (defaults apply if omitted)."""

    names: list[str]
    rule: Rule | None = None

    @field_validator("names")
    @classmethod
    def _names_unique(cls, names: list[str]) -> list[str]:
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            msg = f"Team names must be unique, duplicated: {duplicates}"
            raise ValueError(msg)
        return names


class AnswerRequest(BaseModel):
    attacker: str
    correct: bool


def _http_error(exc: SmashQuizError) -> HTTPException:
    return HTTPException(status_code=_ERROR_STATUS.get(type(exc), 400), detail=str(exc))


def _run(action: Callable[[], Message]) -> Message:
    """Run a controller action, turning game errors into HTTP errors."""
    try:
        return action()
    except SmashQuizError as exc:
        logger.info("action_rejected error=%s detail=%s", type(exc).__name__, exc)
        raise _http_error(exc) from exc


async def _broadcast(bus: EventBus, message: Message) -> dict[str, Any]:
    """Publish a committed message. Failure is reported, the action stays committed."""
    payload = message.to_wire()
    try:
        await bus.publish(payload)
    except Exception as exc:
        logger.exception("broadcast_failed event=%s", message.event.kind)
        raise HTTPException(status_code=502, detail="Failed to send message") from exc
    return payload


@router.post("/initialize")
async def initialize(body: InitializeRequest, controller: ControllerDep, bus: BusDep) -> dict:
    """Start a new game. Replaces any running game and its history."""
    message = _run(lambda: controller.initialize(body.names, body.rule))
    return await _broadcast(bus, message)


@router.post("/damage")
async def damage(body: AnswerRequest, controller: ControllerDep, bus: BusDep) -> dict:
    """Resolve a damage answer from ``attacker``."""
    message = _run(lambda: controller.damage(body.attacker, body.correct))
    return await _broadcast(bus, message)


@router.post("/smash")
async def smash(body: AnswerRequest, controller: ControllerDep, bus: BusDep) -> dict:
    """Resolve a smash answer from ``attacker``."""
    message = _run(lambda: controller.smash(body.attacker, body.correct))
    return await _broadcast(bus, message)


@router.post("/undo")
async def undo(controller: ControllerDep, bus: BusDep) -> dict:
    return await _broadcast(bus, _run(controller.undo))


@router.post("/redo")
async def redo(controller: ControllerDep, bus: BusDep) -> dict:
    return await _broadcast(bus, _run(controller.redo))


@router.post("/goto/{index}")
async def goto(index: int, controller: ControllerDep, bus: BusDep) -> dict:
    """Jump to any recorded point in the history, on any branch."""
    return await _broadcast(bus, _run(lambda: controller.goto(index)))


@router.get("/sync")
async def sync(controller: ControllerDep, bus: BusDep) -> dict:
    """Re-broadcast the full current state without changing it."""
    return await _broadcast(bus, _run(controller.sync))


@router.post("/reset")
async def reset(controller: ControllerDep, bus: BusDep) -> dict:
    return await _broadcast(bus, _run(controller.reset))


@router.post("/ui")
async def ui_update(
    controller: ControllerDep,
    bus: BusDep,
    settings: SettingsDep,
    config: UiConfig | None = Body(default=None),
) -> dict:
    """Forward display settings to every surface. Omit the body to restore defaults."""
    config = config or settings.default_ui_config()
    return await _broadcast(bus, _run(lambda: controller.ui_update(config)))


@router.get("/history", response_model=HistorySummary)
async def history(controller: ControllerDep) -> HistorySummary:
    """Shape of the undo/redo tree. Read-only, nothing is broadcast."""
    try:
        return controller.history()
    except SmashQuizError as exc:
        raise _http_error(exc) from exc
