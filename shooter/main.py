# shooter/main.py
"""Application wiring and entry point for the shooter server."""

import logging
import random
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shooter.api.routes import GameAPI
from shooter.config import settings
from shooter.models.entities import CollisionPolicy
from shooter.services.game_service import GameService
from shooter.services.websocket_service import WebSocketService

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.LOG_LEVEL):
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def create_app(
    collision_policy: Optional[CollisionPolicy] = None,
    rng: Optional[random.Random] = None,
    run_tick_loop: bool = True,
) -> FastAPI:
    """Build the app with its own world, registry and tick loop."""
    policy = CollisionPolicy(collision_policy or settings.COLLISION_POLICY)
    game_service = GameService(rng=rng, collision_policy=policy)
    websocket_service = WebSocketService(game_service)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Server starting (collision policy: {policy.value})")
        if run_tick_loop:
            websocket_service.start_background_tasks()
        yield
        await websocket_service.stop_background_tasks()
        logger.info("Server stopped")

    app = FastAPI(title="Shooter Server", lifespan=lifespan)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, specify your client URL
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    app.state.game_service = game_service
    app.state.websocket_service = websocket_service
    app.include_router(GameAPI(game_service, websocket_service).router)
    return app


def run():
    """Run the server with uvicorn using the configured host and port."""
    import uvicorn

    configure_logging()
    uvicorn.run(
        create_app(),
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        ws_ping_interval=settings.WS_PING_INTERVAL,
        ws_ping_timeout=settings.WS_PING_TIMEOUT,
    )


if __name__ == "__main__":
    run()
