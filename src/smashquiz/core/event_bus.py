"""In-memory broadcast of game messages to the display surfaces.

The command API publishes one wire message per committed action. Every open
SSE stream (the scoreboard, each admin view) holds a subscription with its
own bounded queue and receives the same payload. A display that falls
behind loses messages instead of holding up the operator; it shows a stale
board until someone calls ``GET /api/game/sync``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

logger = logging.getLogger(__name__)


class Subscription:
    """One display's view of the bus."""

    def __init__(self, queue: asyncio.Queue[dict[str, Any]]) -> None:
        self._queue = queue

    async def get(self, timeout: float | None = None) -> dict[str, Any] | None:
        """Next message, or None if nothing arrives within ``timeout`` seconds."""
        try:
            return await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except TimeoutError:
            return None


class EventBus:
    """Fan-out of wire messages to every connected display.

    Usage:
        bus = EventBus()

        # SSE endpoint
        async with bus.subscribe() as sub:
            payload = await sub.get(timeout=15)

        # Command API
        await bus.publish(controller.sync().to_wire())
    """

    def __init__(self, queue_size: int = 100) -> None:
        self._queue_size = queue_size
        self._queues: list[asyncio.Queue[dict[str, Any]]] = []
        self.dropped = 0

    async def publish(self, payload: dict[str, Any]) -> int:
        """Hand ``payload`` to every display. Returns how many accepted it."""
        delivered = 0
        for queue in self._queues:
            try:
                queue.put_nowait(payload)
                delivered += 1
            except asyncio.QueueFull:
                self.dropped += 1
                logger.warning("message_dropped reason=slow_display dropped=%d", self.dropped)
        return delivered

    @asynccontextmanager
    async def subscribe(self, max_size: int | None = None) -> AsyncIterator[Subscription]:
        """Register a display for as long as the context is open."""
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=max_size or self._queue_size)
        self._queues.append(queue)
        try:
            yield Subscription(queue)
        finally:
            self._queues.remove(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._queues)
