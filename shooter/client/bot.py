# shooter/client/bot.py
"""Headless client: keeps a local copy of the world and plays by itself."""

import argparse
import asyncio
import logging
import time
from typing import Callable, Optional
from urllib.parse import urlencode

import websockets
from websockets.exceptions import ConnectionClosed

from shooter.config.settings import (
    GROUND_Y,
    LIVENESS_THRESHOLD,
    PLAYER_X,
    PORT,
    SHOOT_COOLDOWN,
)
from shooter.models.entities import BulletOrigin, WorldState
from shooter.models.protocol import Command, ProtocolError, decode_snapshot, encode_command

logger = logging.getLogger(__name__)

AUTOPILOT_INTERVAL = 1.0 / 60.0
DODGE_DISTANCE = 120
RESET_RETRY = 1.0


def choose_command(state: WorldState, player_id: str) -> Optional[Command]:
    """Pick the next move for player_id from a received snapshot."""
    if state.game_over:
        return Command.RESET

    player = state.players.get(player_id)
    if player is None:
        return None

    grounded = player.y >= GROUND_Y
    for bullet in state.bullets:
        if bullet.origin is BulletOrigin.ENEMY and 0 < bullet.x - PLAYER_X < DODGE_DISTANCE:
            return Command.JUMP if grounded else None

    if any(not e.dead for e in state.enemies):
        return Command.SHOOT
    return None


class ShooterClient:
    """Connection to the shooter server.

    Every snapshot fully replaces the local view. The shoot cooldown lives
    here because the server does not rate limit.
    """

    def __init__(
        self,
        player_id: str,
        base_url: str = f"ws://localhost:{PORT}",
        shoot_cooldown: float = SHOOT_COOLDOWN,
        liveness_threshold: float = LIVENESS_THRESHOLD,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.player_id = player_id
        self.base_url = base_url.rstrip("/")
        self.shoot_cooldown = shoot_cooldown
        self.liveness_threshold = liveness_threshold
        self.clock = clock

        self.ws = None
        self.state: Optional[WorldState] = None
        self.last_message_at: Optional[float] = None
        self._last_shot_at: Optional[float] = None
        self._reset_sent_at: Optional[float] = None

    @property
    def url(self) -> str:
        return f"{self.base_url}/ws?{urlencode({'id': self.player_id})}"

    def handle_message(self, raw) -> bool:
        """Replace the local view with a received snapshot."""
        try:
            state = decode_snapshot(raw)
        except ProtocolError as e:
            logger.warning(f"Discarding snapshot: {e}")
            return False
        self.state = state
        self.last_message_at = self.clock()
        if not state.game_over:
            self._reset_sent_at = None
        return True

    def mark_connected(self):
        """Start the liveness window at connect time, before any snapshot."""
        self.last_message_at = self.clock()

    def is_alive(self) -> bool:
        """False once the server has been silent longer than the threshold."""
        if self.last_message_at is None:
            return False
        return self.clock() - self.last_message_at <= self.liveness_threshold

    def can_shoot(self) -> bool:
        if self._last_shot_at is None:
            return True
        return self.clock() - self._last_shot_at >= self.shoot_cooldown

    async def send_command(self, command: Command) -> bool:
        """Send a command. Shots inside the cooldown and repeated resets are not sent."""
        if self.ws is None:
            return False
        if command is Command.SHOOT:
            if not self.can_shoot():
                return False
            self._last_shot_at = self.clock()
        if command is Command.RESET:
            # One reset per finished round, until a snapshot shows it restarted.
            if self._reset_sent_at is not None and self.clock() - self._reset_sent_at < RESET_RETRY:
                return False
            self._reset_sent_at = self.clock()
        await self.ws.send(encode_command(self.player_id, command))
        return True

    async def _reader(self, ws):
        try:
            async for raw in ws:
                self.handle_message(raw)
        except ConnectionClosed as e:
            logger.info(f"Connection closed: {e}")

    async def run(self, duration: Optional[float] = None):
        """Connect and run the autopilot until the server goes away or time runs out."""
        started = self.clock()
        async with websockets.connect(self.url) as ws:
            self.ws = ws
            self.mark_connected()
            logger.info(f"Connected to {self.url}")
            reader = asyncio.create_task(self._reader(ws))
            try:
                while not reader.done():
                    await asyncio.sleep(AUTOPILOT_INTERVAL)
                    if duration is not None and self.clock() - started >= duration:
                        break
                    if not self.is_alive():
                        logger.warning(
                            f"No snapshot for {self.liveness_threshold}s, treating server as gone"
                        )
                        break
                    if self.state is None:
                        continue
                    command = choose_command(self.state, self.player_id)
                    if command:
                        await self.send_command(command)
            finally:
                reader.cancel()
                self.ws = None

        if self.state:
            logger.info(f"Finished with {self.state.points} points at level {self.state.level}")


def main():
    parser = argparse.ArgumentParser(description="Headless shooter client")
    parser.add_argument("--url", default=f"ws://localhost:{PORT}", help="Server base URL")
    parser.add_argument("--id", default="bot", help="Player id")
    parser.add_argument("--duration", type=float, default=None, help="Seconds to play")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    client = ShooterClient(args.id, base_url=args.url)
    try:
        asyncio.run(client.run(duration=args.duration))
    except (OSError, ConnectionClosed) as e:
        logger.error(f"Connection error: {e}")


if __name__ == "__main__":
    main()
