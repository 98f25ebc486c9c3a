# shooter/services/game_service.py
"""Core game logic and state management."""

import asyncio
import logging
import random
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from shooter.models.entities import CollisionPolicy, Player, WorldState
from shooter.models.protocol import Command, encode_snapshot, snapshot_to_dict
from shooter.config.settings import GROUND_Y
from .commands import apply_command
from .simulation import SimulationEngine

logger = logging.getLogger(__name__)


class GameService:
    """Owns the world state and the single lock that serializes all access to it."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        collision_policy: CollisionPolicy = CollisionPolicy.GAME_OVER,
    ):
        self._state = WorldState()
        self._lock = asyncio.Lock()
        self.engine = SimulationEngine(rng=rng, collision_policy=collision_policy)

    @asynccontextmanager
    async def locked(self) -> AsyncIterator[WorldState]:
        """Yield the world state while holding the state lock."""
        async with self._lock:
            yield self._state

    async def tick(self, dt: float):
        """Run one simulation step under the lock."""
        async with self.locked() as state:
            self.engine.step(state, dt)

    async def apply_command(self, player_id: str, command: Command) -> bool:
        async with self.locked() as state:
            return apply_command(state, player_id, command)

    async def create_player(self, player_id: str) -> Player:
        """Create a grounded player, replacing any previous one with the same id."""
        player = Player(id=player_id, y=GROUND_Y, vy=0.0)
        async with self.locked() as state:
            state.players[player_id] = player
        return player

    async def remove_player(self, player_id: str):
        async with self.locked() as state:
            state.players.pop(player_id, None)

    async def snapshot(self) -> dict:
        """Get a consistent copy of the world as a wire payload."""
        async with self.locked() as state:
            return snapshot_to_dict(state)

    async def encoded_snapshot(self) -> str:
        """Serialize the world once, under the lock, for broadcasting."""
        async with self.locked() as state:
            return encode_snapshot(state)

    async def get_stats(self) -> dict:
        async with self.locked() as state:
            return {
                "totalPlayers": len(state.players),
                "totalEnemies": len(state.enemies),
                "totalBullets": len(state.bullets),
                "points": state.points,
                "level": state.level,
                "gameOver": state.game_over,
            }
