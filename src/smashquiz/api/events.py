"""SSE (Server-Sent Events) endpoint for the scoreboard and admin views."""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse

from smashquiz.api.deps import BusDep, SettingsDep

router = APIRouter(prefix="/api/events", tags=["events"])
logger = logging.getLogger(__name__)

# SSE event name for every game message.
MESSAGE_EVENT = "message"


def _connection_slots(request: Request) -> asyncio.Semaphore:
    return request.app.state.sse_slots


def format_sse(payload: dict) -> str:
    """One SSE frame carrying a wire message."""
    return f"event: {MESSAGE_EVENT}\ndata: {json.dumps(payload)}\n\n"


@router.get("/stream")
async def sse_stream(request: Request, bus: BusDep, settings: SettingsDep) -> StreamingResponse:
    """Server-Sent Events stream of game messages.

    A new display should call ``GET /api/game/sync`` after connecting to
    receive the full state; the stream only carries changes.

    Errors:
        429: connection limit reached
    """
    slots = _connection_slots(request)
    if slots.locked():
        raise HTTPException(
            status_code=429,
            detail=(
                f"Too many concurrent SSE connections "
                f"(limit: {settings.smashquiz_max_sse_connections}). Try again later."
            ),
        )

    heartbeat = settings.smashquiz_sse_heartbeat_seconds

    async def generate():
        async with slots:
            # Flush a comment so the browser moves from "connecting" to "open".
            yield ": connected\n\n"

            async with bus.subscribe() as sub:
                while True:
                    if await request.is_disconnected():
                        break
                    payload = await sub.get(timeout=heartbeat)
                    if payload is None:
                        yield ": heartbeat\n\n"
                        continue
                    yield format_sse(payload)
        logger.debug("sse_stream_closed")

    return StreamingResponse(
        generate(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.get("/health")
async def events_health(request: Request, bus: BusDep, settings: SettingsDep) -> dict:
    """Display count, dropped messages and SSE connection usage."""
    slots = _connection_slots(request)
    return {
        "status": "ok",
        "subscribers": bus.subscriber_count,
        "dropped_messages": bus.dropped,
        "active_sse_connections": settings.smashquiz_max_sse_connections - slots._value,  # noqa: SLF001
        "max_sse_connections": settings.smashquiz_max_sse_connections,
    }
