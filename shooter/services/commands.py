# shooter/services/commands.py
"""Applies client commands to the world. Callers must hold the state lock."""

from shooter.models.entities import Bullet, BulletOrigin, WorldState
from shooter.models.protocol import Command
from shooter.config.settings import (
    GROUND_Y,
    JUMP_IMPULSE,
    PLAYER_BULLET_SPEED,
    PLAYER_HEIGHT,
    PLAYER_X,
)


def apply_command(state: WorldState, player_id: str, command: Command) -> bool:
    """Apply one command for player_id.

    Returns False when the command changed nothing: the player is gone, a
    jump was requested while airborne, or a shot was fired after game over.
    """
    player = state.players.get(player_id)
    if player is None:
        return False

    if command is Command.JUMP:
        if player.y < GROUND_Y:
            return False
        player.vy = JUMP_IMPULSE
        return True

    if command is Command.SHOOT:
        if state.game_over:
            return False
        state.bullets.append(
            Bullet(
                x=PLAYER_X,
                y=player.y - PLAYER_HEIGHT / 2,
                vx=PLAYER_BULLET_SPEED,
                vy=0.0,
                origin=BulletOrigin.PLAYER,
            )
        )
        return True

    if command is Command.RESET:
        reset_round(state)
        player.y = -PLAYER_HEIGHT
        player.vy = 0.0
        player.respawning = True
        return True

    return False


def reset_round(state: WorldState):
    """Start a fresh round: score, level, clock and hostiles cleared."""
    state.points = 0
    state.level = 1
    state.game_over = False
    state.time = 0.0
    state.enemies = []
    state.bullets = []
