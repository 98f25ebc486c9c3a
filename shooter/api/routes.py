# shooter/api/routes.py
"""API routes for the game server."""

from fastapi import APIRouter, WebSocket

from shooter.services.game_service import GameService
from shooter.services.websocket_service import WebSocketService
from shooter.config.settings import get_game_config


class GameAPI:
    """API routes for game-related endpoints."""

    def __init__(self, game_service: GameService, websocket_service: WebSocketService):
        self.game_service = game_service
        self.websocket_service = websocket_service
        self.router = APIRouter()
        self._setup_routes()

    def _setup_routes(self):
        """Set up all API routes."""

        @self.router.get("/")
        async def root():
            """Root endpoint."""
            return {"message": "Shooter Server Running"}

        @self.router.get("/api/game/config")
        async def get_game_config_endpoint():
            """Get game configuration including screen size, physics and timing."""
            return get_game_config()

        @self.router.get("/api/game/state")
        async def get_state():
            """Get the current world snapshot."""
            return await self.game_service.snapshot()

        @self.router.get("/api/game/stats")
        async def get_game_stats():
            """Get game statistics."""
            stats = await self.game_service.get_stats()
            stats["totalConnections"] = len(self.websocket_service.registry)
            return stats

        @self.router.websocket("/ws")
        async def websocket_endpoint(websocket: WebSocket):
            await self.websocket_service.handle_connection(websocket)
