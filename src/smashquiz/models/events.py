"""Messages sent to display surfaces after every action.

A message pairs the team states that changed with an event describing what
happened. ``Message.to_wire`` renders the externally tagged shape the
scoreboard and admin views consume:

    "reset"
    {"initialize": {...rule}}
    {"sync": {...rule}}
    {"answer": {"actor_type": "smash", "success": true}}
    {"uiUpdate": {"fontSize": 14.0}}
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from smashquiz.models.rules import Rule
from smashquiz.models.team import Teams


class Actor(StrEnum):
    """Kind of answer a team gave."""

    SMASH = "smash"
    DAMAGE = "damage"


MIN_FONT_SIZE = 5.0
MAX_FONT_SIZE = 30.0


class UiConfig(BaseModel):
    """Display settings forwarded verbatim to every display surface."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    font_size: float = Field(default=12.0, ge=MIN_FONT_SIZE, le=MAX_FONT_SIZE)


class ResetEvent(BaseModel):
    kind: Literal["reset"] = "reset"


class InitializeEvent(BaseModel):
    kind: Literal["initialize"] = "initialize"
    rule: Rule


class SyncEvent(BaseModel):
    kind: Literal["sync"] = "sync"
    rule: Rule


class AnswerEvent(BaseModel):
    kind: Literal["answer"] = "answer"
    actor_type: Actor
    success: bool


class UiUpdateEvent(BaseModel):
    kind: Literal["uiUpdate"] = "uiUpdate"
    config: UiConfig


Event = Annotated[
    ResetEvent | InitializeEvent | SyncEvent | AnswerEvent | UiUpdateEvent,
    Field(discriminator="kind"),
]


def _event_payload(event: Event) -> Any:
    if isinstance(event, ResetEvent):
        return "reset"
    if isinstance(event, (InitializeEvent, SyncEvent)):
        return {event.kind: event.rule.model_dump(by_alias=True)}
    if isinstance(event, AnswerEvent):
        return {"answer": {"actor_type": event.actor_type.value, "success": event.success}}
    return {"uiUpdate": event.config.model_dump(by_alias=True)}


class Message(BaseModel):
    """Changed team states plus the event that changed them."""

    update: Teams = Field(default_factory=dict)
    event: Event

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready payload for display surfaces."""
        return {
            "update": {name: state.model_dump() for name, state in self.update.items()},
            "event": _event_payload(self.event),
        }
