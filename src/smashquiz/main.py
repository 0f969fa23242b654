"""FastAPI application factory."""

import asyncio
import logging
import random
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from smashquiz.api.events import router as events_router
from smashquiz.api.game import router as game_router
from smashquiz.config import Settings
from smashquiz.core.event_bus import EventBus
from smashquiz.core.session import SessionController

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log the session lifecycle; the game itself lives only in memory."""
    settings: Settings = app.state.settings
    logger.info(
        "smashquiz_started env=%s seeded=%s",
        settings.smashquiz_env,
        settings.smashquiz_rng_seed is not None,
    )

    yield

    app.state.controller.reset()
    logger.info("smashquiz_stopped subscribers=%d", app.state.event_bus.subscriber_count)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the SmashQuiz FastAPI application."""
    settings = settings or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.smashquiz_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="SmashQuiz",
        version="0.1.0",
        description="Live quiz battle tracker: damage, smashes, stock, and branching undo",
        docs_url="/docs" if settings.smashquiz_env != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.event_bus = EventBus(queue_size=settings.smashquiz_subscriber_queue_size)
    app.state.controller = SessionController(rng=random.Random(settings.smashquiz_rng_seed))
    app.state.sse_slots = asyncio.Semaphore(settings.smashquiz_max_sse_connections)

    app.include_router(game_router)
    app.include_router(events_router)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """422 with location, message and type only.

        The rejected input is not echoed back: a NaN or Infinity in the body
        cannot be rendered as JSON.
        """
        errors = exc.errors()
        logger.info("request_rejected path=%s errors=%d", request.url.path, len(errors))
        return JSONResponse(
            status_code=422,
            content={
                "detail": [
                    {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in errors
                ]
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.smashquiz_env}

    return app


app = create_app()
