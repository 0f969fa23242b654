"""FastAPI dependency injection for the session controller, event bus, and settings."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from smashquiz.config import Settings
from smashquiz.core.event_bus import EventBus
from smashquiz.core.session import SessionController


def get_controller(request: Request) -> SessionController:
    """Get the session controller from app state."""
    return request.app.state.controller


def get_bus(request: Request) -> EventBus:
    """Get the EventBus from app state."""
    return request.app.state.event_bus


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


ControllerDep = Annotated[SessionController, Depends(get_controller)]
BusDep = Annotated[EventBus, Depends(get_bus)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
