# shooter/services/simulation.py
"""Fixed-tick world simulation: sun, physics, enemy AI and collisions."""

import logging
import math
import random
from typing import Optional

from shooter.models.entities import (
    Bullet,
    BulletOrigin,
    CollisionPolicy,
    Enemy,
    Sun,
    SunColor,
    WorldState,
)
from shooter.config.settings import *
from shooter.utils.helpers import Rect, calculate_distance, inside_open_rect, lerp, rects_overlap

logger = logging.getLogger(__name__)


def level_for_points(points: int) -> int:
    return 1 + points // LEVEL_UP_POINTS


def compute_sun(elapsed: float) -> Sun:
    """Place the sun on a half circle over the screen bottom, dimming as it sets."""
    progress = math.fmod(elapsed, SUN_PERIOD) / SUN_PERIOD
    theta = math.pi - progress * math.pi
    radius = SCREEN_WIDTH / 2
    center_x = SCREEN_WIDTH / 2
    center_y = SCREEN_HEIGHT

    green = int(lerp(SUN_GREEN_START, SUN_GREEN_END, progress))
    return Sun(
        x=center_x + radius * math.cos(theta),
        y=center_y - radius * math.sin(theta),
        color=SunColor(R=255, G=green, B=0, A=255),
    )


class SimulationEngine:
    """Advances a WorldState in place. Callers must hold the state lock."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        collision_policy: CollisionPolicy = CollisionPolicy.GAME_OVER,
    ):
        self.rng = rng or random.Random()
        self.collision_policy = CollisionPolicy(collision_policy)

    def step(self, state: WorldState, dt: float):
        """Run one tick. A finished round only keeps the sun and players moving."""
        state.time += dt
        state.sun = compute_sun(state.time)
        self.update_players(state, dt)

        if state.game_over:
            return

        self.update_bullets(state, dt)
        self.update_enemies(state, dt)
        self.check_collisions(state)

    def update_players(self, state: WorldState, dt: float):
        for player in state.players.values():
            player.vy += GRAVITY * dt
            player.y += player.vy * dt
            if player.y >= GROUND_Y:
                player.y = GROUND_Y
                player.vy = 0.0
                player.respawning = False

    def update_bullets(self, state: WorldState, dt: float):
        for bullet in state.bullets:
            bullet.x += bullet.vx * dt
            bullet.y += bullet.vy * dt
        self._cull_bullets(state)

    def update_enemies(self, state: WorldState, dt: float):
        for enemy in state.enemies:
            if enemy.dead:
                enemy.deathTimer += dt
                enemy.vy += GRAVITY * dt
                enemy.y += enemy.vy * dt
                continue

            enemy.x += enemy.vx * dt
            enemy.walkPhase += dt * ENEMY_WALK_RATE
            enemy.shootTimer -= dt
            if enemy.shootTimer <= 0:
                state.bullets.append(
                    Bullet(
                        x=enemy.x,
                        y=enemy.y - PLAYER_HEIGHT / 2,
                        vx=ENEMY_BULLET_SPEED,
                        vy=0.0,
                        origin=BulletOrigin.ENEMY,
                    )
                )
                enemy.shootTimer = self._shot_delay(ENEMY_SHOT_DELAY)

        state.enemies = [
            e
            for e in state.enemies
            if e.x > ENEMY_CULL_LEFT and e.y < GROUND_Y + ENEMY_CULL_DEPTH
        ]

        if not state.enemies:
            state.enemies.append(self.spawn_enemy(state.level))

    def spawn_enemy(self, level: int) -> Enemy:
        """Create an enemy just past the right edge, walking left."""
        return Enemy(
            x=SCREEN_WIDTH + ENEMY_SPAWN_MARGIN,
            y=GROUND_Y - ENEMY_GROUND_OFFSET,
            vx=-(ENEMY_BASE_SPEED + level * ENEMY_SPEED_PER_LEVEL),
            vy=0.0,
            shootTimer=self._shot_delay(ENEMY_FIRST_SHOT_DELAY),
        )

    def check_collisions(self, state: WorldState):
        """Resolve kills and player hits for the current positions."""
        for enemy in state.enemies:
            if enemy.dead:
                continue
            for bullet in state.bullets:
                if bullet.origin is not BulletOrigin.PLAYER:
                    continue
                if calculate_distance(enemy.x, enemy.y, bullet.x, bullet.y) < KILL_RADIUS:
                    enemy.dead = True
                    enemy.deathTimer = 0.0
                    enemy.vy = 0.0
                    state.points += KILL_BONUS
                    state.level = level_for_points(state.points)
                    bullet.x = CONSUMED_BULLET_X
                    break

        self._cull_bullets(state)

        for player in state.players.values():
            body = Rect(
                PLAYER_X - PLAYER_WIDTH / 2,
                player.y - PLAYER_HEIGHT,
                PLAYER_WIDTH,
                PLAYER_HEIGHT,
            )
            for bullet in state.bullets:
                if bullet.origin is not BulletOrigin.ENEMY:
                    continue
                half = BULLET_BOX_SIZE / 2
                box = Rect(bullet.x - half, bullet.y - half, BULLET_BOX_SIZE, BULLET_BOX_SIZE)
                if rects_overlap(body, box):
                    self._player_hit(state, player.id, "enemy bullet")

            for enemy in state.enemies:
                if enemy.dead:
                    continue
                if calculate_distance(enemy.x, enemy.y, PLAYER_X, player.y) < CONTACT_RADIUS:
                    self._player_hit(state, player.id, "enemy contact")

    def _player_hit(self, state: WorldState, player_id: str, cause: str):
        if self.collision_policy is CollisionPolicy.LOG_ONLY:
            logger.info(f"Player {player_id} hit by {cause}")
            return
        if not state.game_over:
            state.game_over = True
            logger.info(f"Game over: player {player_id} hit by {cause} (points={state.points})")

    def _shot_delay(self, base: float) -> float:
        return base + self.rng.random() * ENEMY_SHOT_JITTER

    @staticmethod
    def _cull_bullets(state: WorldState):
        state.bullets = [
            b for b in state.bullets if inside_open_rect(b.x, b.y, SCREEN_WIDTH, SCREEN_HEIGHT)
        ]
