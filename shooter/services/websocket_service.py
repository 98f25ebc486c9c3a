# shooter/services/websocket_service.py
"""WebSocket connection management, the tick loop and state broadcasting."""

import asyncio
import logging
from typing import Optional, Union

from fastapi import WebSocket, WebSocketDisconnect

from shooter.config import settings
from shooter.models.protocol import ProtocolError, parse_client_message
from .client_registry import ClientRegistry
from .game_service import GameService

logger = logging.getLogger(__name__)


def resolve_player_id(websocket: WebSocket) -> str:
    """Use the ?id= query value, or the remote address when it is missing."""
    player_id = websocket.query_params.get("id")
    if player_id:
        return player_id
    if websocket.client is None:
        return "unknown"
    return f"{websocket.client.host}:{websocket.client.port}"


class WebSocketService:
    """Manages WebSocket connections and message routing."""

    def __init__(
        self,
        game_service: GameService,
        registry: Optional[ClientRegistry] = None,
        send_timeout: float = settings.SEND_TIMEOUT,
    ):
        self.game_service = game_service
        self.registry = registry or ClientRegistry()
        self.send_timeout = send_timeout
        self._update_task: Optional[asyncio.Task] = None

    def start_background_tasks(self):
        """Start the fixed-interval simulation loop."""
        if not self._update_task:
            self._update_task = asyncio.create_task(self._tick_loop())
            logger.info("Tick loop started")

    async def stop_background_tasks(self):
        if self._update_task:
            self._update_task.cancel()
            try:
                await self._update_task
            except asyncio.CancelledError:
                pass
            self._update_task = None
            logger.info("Tick loop stopped")

    async def _tick_loop(self):
        """Step the world and broadcast it every TICK_INTERVAL seconds."""
        loop = asyncio.get_running_loop()
        next_tick = loop.time()

        while True:
            next_tick += settings.TICK_INTERVAL
            delay = next_tick - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            else:
                # Behind schedule: drop the missed ticks.
                next_tick = loop.time()

            try:
                await self.run_tick(settings.TICK_DT)
            except Exception:
                logger.exception("Tick failed")

    async def run_tick(self, dt: float):
        await self.game_service.tick(dt)
        await self.broadcast_state()

    async def broadcast_state(self):
        """Serialize the world once and send it to every registered client."""
        async with self.registry.lock:
            data = await self.game_service.encoded_snapshot()
            recipients = self.registry.items()
        if not recipients:
            return
        await asyncio.gather(
            *(self._send(player_id, websocket, data) for player_id, websocket in recipients)
        )

    async def _send(self, player_id: str, websocket: WebSocket, data: str):
        """Send one frame; failures are logged and never reach other recipients."""
        try:
            await asyncio.wait_for(websocket.send_text(data), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Send to {player_id} timed out, dropping this tick")
        except Exception as e:
            logger.warning(f"Send to {player_id} failed: {e!r}")

    async def handle_connection(self, websocket: WebSocket):
        """Handle a new WebSocket connection until it closes."""
        player_id = resolve_player_id(websocket)
        await websocket.accept()

        try:
            await self.connect(player_id, websocket)
            await self._handle_client_messages(websocket, player_id)
        except WebSocketDisconnect:
            logger.info(f"Player {player_id} closed the connection")
        except Exception:
            logger.exception(f"Read from {player_id} failed")
        finally:
            await self.disconnect(player_id, websocket)

    async def connect(self, player_id: str, websocket: WebSocket):
        """Register the connection and its player as one step."""
        async with self.registry.lock:
            await self.game_service.create_player(player_id)
            self.registry.add(player_id, websocket)
        logger.info(f"Player {player_id} connected")

    async def disconnect(self, player_id: str, websocket: WebSocket):
        """Deregister the connection and remove its player."""
        async with self.registry.lock:
            if self.registry.discard(player_id, websocket):
                await self.game_service.remove_player(player_id)
        logger.info(f"Player {player_id} disconnected")

    async def _handle_client_messages(self, websocket: WebSocket, player_id: str):
        """Handle incoming messages from a client."""
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            await self.process_message(player_id, raw)

    async def process_message(self, player_id: str, raw: Union[str, bytes]):
        """Decode and apply one inbound frame. Bad frames are logged and dropped."""
        try:
            message = parse_client_message(raw)
        except ProtocolError as e:
            logger.warning(f"Discarding message from {player_id}: {e}")
            return

        target = message.playerId or player_id
        await self.game_service.apply_command(target, message.command)
