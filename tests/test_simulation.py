import random

import pytest

from shooter.config.settings import (
    ENEMY_SHOT_DELAY,
    ENEMY_SHOT_JITTER,
    GROUND_Y,
    KILL_BONUS,
    PLAYER_HEIGHT,
    PLAYER_X,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    SUN_PERIOD,
    TICK_DT,
)
from shooter.models.entities import (
    Bullet,
    BulletOrigin,
    CollisionPolicy,
    Enemy,
    Player,
    WorldState,
)
from shooter.services.simulation import SimulationEngine, compute_sun, level_for_points


@pytest.fixture
def engine():
    return SimulationEngine(rng=random.Random(1234))


@pytest.fixture
def log_only_engine():
    return SimulationEngine(rng=random.Random(1234), collision_policy=CollisionPolicy.LOG_ONLY)


def live_enemy(x, y=GROUND_Y - 10, shoot_timer=5.0):
    return Enemy(x=x, y=y, vx=-110.0, vy=0.0, shootTimer=shoot_timer)


def test_sun_rises_at_left_edge_and_peaks_at_half_period():
    sun = compute_sun(0.0)
    assert sun.x == pytest.approx(0.0)
    assert sun.y == pytest.approx(SCREEN_HEIGHT)
    assert sun.color.G == 255

    noon = compute_sun(SUN_PERIOD / 2)
    assert noon.x == pytest.approx(SCREEN_WIDTH / 2)
    assert noon.y == pytest.approx(SCREEN_HEIGHT - SCREEN_WIDTH / 2)
    assert noon.color.G == 177
    assert (noon.color.R, noon.color.B, noon.color.A) == (255, 0, 255)


def test_sun_cycle_repeats_every_period():
    assert compute_sun(SUN_PERIOD + 3.0) == compute_sun(3.0)


def test_step_advances_time_and_sun(engine):
    state = WorldState()
    engine.step(state, TICK_DT)
    assert state.time == pytest.approx(TICK_DT)
    assert state.sun == compute_sun(TICK_DT)


def test_grounded_player_stays_on_ground(engine):
    state = WorldState(players={"a": Player(id="a", y=GROUND_Y)})
    for _ in range(30):
        engine.update_players(state, TICK_DT)
    assert state.players["a"].y == GROUND_Y
    assert state.players["a"].vy == 0.0


def test_jump_arc_stays_between_top_of_world_and_ground(log_only_engine):
    player = Player(id="a", y=GROUND_Y, vy=-350.0)
    state = WorldState(players={"a": player})
    heights = []
    for _ in range(120):
        log_only_engine.step(state, TICK_DT)
        heights.append(player.y)
    assert min(heights) < GROUND_Y - 50
    assert all(-PLAYER_HEIGHT <= y <= GROUND_Y for y in heights)
    assert player.y == GROUND_Y
    assert player.vy == 0.0


def test_respawning_player_settles_through_normal_ticks(log_only_engine):
    player = Player(id="a", y=-PLAYER_HEIGHT, vy=0.0, respawning=True)
    state = WorldState(players={"a": player})
    for _ in range(200):
        log_only_engine.step(state, TICK_DT)
        assert -PLAYER_HEIGHT <= player.y <= GROUND_Y
    assert player.y == GROUND_Y
    assert player.respawning is False


def test_spawns_one_enemy_when_none_present(engine):
    state = WorldState()
    engine.step(state, TICK_DT)
    assert len(state.enemies) == 1
    enemy = state.enemies[0]
    assert (enemy.x, enemy.y) == (SCREEN_WIDTH + 50, GROUND_Y - 10)
    assert enemy.vx < 0
    assert enemy.vy == 0
    assert 2.0 <= enemy.shootTimer < 3.0


def test_spawn_speed_grows_with_level(engine):
    assert engine.spawn_enemy(1).vx == -110.0
    assert engine.spawn_enemy(3).vx == -130.0


def test_no_spawn_while_an_enemy_is_present(engine):
    state = WorldState(enemies=[live_enemy(400)])
    engine.step(state, TICK_DT)
    assert len(state.enemies) == 1
    assert state.enemies[0].x == pytest.approx(400 - 110.0 * TICK_DT)


def test_enemy_fires_when_timer_runs_out(engine):
    enemy = live_enemy(600, shoot_timer=0.001)
    state = WorldState(enemies=[enemy])
    engine.update_enemies(state, TICK_DT)

    assert len(state.bullets) == 1
    bullet = state.bullets[0]
    assert bullet.origin is BulletOrigin.ENEMY
    assert bullet.vx < 0
    assert bullet.x == enemy.x
    assert bullet.y == enemy.y - PLAYER_HEIGHT / 2
    assert ENEMY_SHOT_DELAY <= enemy.shootTimer < ENEMY_SHOT_DELAY + ENEMY_SHOT_JITTER


def test_live_enemy_walks_and_counts_down(engine):
    enemy = live_enemy(600, shoot_timer=1.0)
    engine.update_enemies(WorldState(enemies=[enemy]), TICK_DT)
    assert enemy.walkPhase == pytest.approx(4 * TICK_DT)
    assert enemy.shootTimer == pytest.approx(1.0 - TICK_DT)
    assert enemy.vy == 0


def test_dead_enemy_falls_and_never_shoots(engine):
    enemy = live_enemy(600, shoot_timer=0.001)
    enemy.dead = True
    state = WorldState(enemies=[enemy])
    for _ in range(10):
        engine.update_enemies(state, TICK_DT)
    assert state.bullets == []
    assert enemy.shootTimer == 0.001
    assert enemy.x == 600
    assert enemy.vy > 0
    assert enemy.y > GROUND_Y - 10
    assert enemy.deathTimer == pytest.approx(10 * TICK_DT)


def test_enemy_past_left_edge_is_replaced(engine):
    state = WorldState(enemies=[live_enemy(-49)])
    engine.update_enemies(state, TICK_DT)
    assert len(state.enemies) == 1
    assert state.enemies[0].x == SCREEN_WIDTH + 50


def test_fallen_enemy_is_culled(engine):
    enemy = live_enemy(300, y=GROUND_Y + 99)
    enemy.dead = True
    enemy.vy = 100.0
    state = WorldState(enemies=[enemy, live_enemy(500)])
    engine.update_enemies(state, TICK_DT)
    assert enemy not in state.enemies
    assert len(state.enemies) == 1


def test_bullets_leaving_screen_are_culled(engine):
    state = WorldState(
        bullets=[
            Bullet(x=799, y=300, vx=500, vy=0, origin=BulletOrigin.PLAYER),
            Bullet(x=2, y=300, vx=-300, vy=0, origin=BulletOrigin.ENEMY),
            Bullet(x=400, y=300, vx=500, vy=0, origin=BulletOrigin.PLAYER),
        ]
    )
    engine.update_bullets(state, TICK_DT)
    assert len(state.bullets) == 1
    assert state.bullets[0].x == pytest.approx(400 + 500 * TICK_DT)


def test_bullet_on_boundary_is_dropped(engine):
    state = WorldState(
        bullets=[
            Bullet(x=SCREEN_WIDTH, y=300, vx=0, vy=0, origin=BulletOrigin.PLAYER),
            Bullet(x=300, y=0, vx=0, vy=0, origin=BulletOrigin.ENEMY),
        ]
    )
    engine.update_bullets(state, TICK_DT)
    assert state.bullets == []


def test_player_bullet_kills_enemy(engine):
    enemy = live_enemy(400)
    bullet = Bullet(x=405, y=enemy.y, vx=500, vy=0, origin=BulletOrigin.PLAYER)
    state = WorldState(enemies=[enemy], bullets=[bullet])
    engine.check_collisions(state)

    assert enemy.dead is True
    assert enemy.vy == 0.0
    assert state.points == KILL_BONUS
    assert state.bullets == []


def test_one_enemy_consumes_only_one_bullet_per_tick(engine):
    enemy = live_enemy(400)
    bullets = [
        Bullet(x=401, y=enemy.y, vx=500, vy=0, origin=BulletOrigin.PLAYER),
        Bullet(x=402, y=enemy.y, vx=500, vy=0, origin=BulletOrigin.PLAYER),
    ]
    state = WorldState(enemies=[enemy], bullets=bullets)
    engine.check_collisions(state)
    assert state.points == KILL_BONUS
    assert len(state.bullets) == 1


def test_dead_enemy_is_not_a_target(engine):
    enemy = live_enemy(400)
    enemy.dead = True
    state = WorldState(
        enemies=[enemy],
        bullets=[Bullet(x=400, y=enemy.y, vx=500, vy=0, origin=BulletOrigin.PLAYER)],
    )
    engine.check_collisions(state)
    assert state.points == 0
    assert len(state.bullets) == 1


def test_enemy_bullets_do_not_kill_enemies(engine):
    enemy = live_enemy(400)
    state = WorldState(
        enemies=[enemy],
        bullets=[Bullet(x=400, y=enemy.y, vx=-300, vy=0, origin=BulletOrigin.ENEMY)],
    )
    engine.check_collisions(state)
    assert enemy.dead is False
    assert state.points == 0


def test_kills_raise_the_level(engine):
    enemy = live_enemy(400)
    state = WorldState(
        enemies=[enemy],
        bullets=[Bullet(x=400, y=enemy.y, vx=500, vy=0, origin=BulletOrigin.PLAYER)],
        points=900,
    )
    engine.check_collisions(state)
    assert state.points == 1000
    assert state.level == 2
    assert level_for_points(0) == 1
    assert level_for_points(2999) == 3


def player_hit_by_bullet_state():
    return WorldState(
        players={"a": Player(id="a", y=GROUND_Y)},
        bullets=[Bullet(x=PLAYER_X, y=GROUND_Y - 20, vx=-300, vy=0, origin=BulletOrigin.ENEMY)],
    )


def test_enemy_bullet_ends_round_under_game_over_policy(engine):
    state = player_hit_by_bullet_state()
    engine.check_collisions(state)
    assert state.game_over is True


def test_enemy_bullet_only_logged_under_log_only_policy(log_only_engine, caplog):
    state = player_hit_by_bullet_state()
    with caplog.at_level("INFO"):
        log_only_engine.check_collisions(state)
    assert state.game_over is False
    assert "hit by enemy bullet" in caplog.text


def test_player_bullet_never_hurts_players(engine):
    state = WorldState(
        players={"a": Player(id="a", y=GROUND_Y)},
        bullets=[Bullet(x=PLAYER_X, y=GROUND_Y - 20, vx=500, vy=0, origin=BulletOrigin.PLAYER)],
    )
    engine.check_collisions(state)
    assert state.game_over is False


def test_enemy_contact_ends_round(engine):
    state = WorldState(
        players={"a": Player(id="a", y=GROUND_Y)},
        enemies=[live_enemy(PLAYER_X + 5, y=GROUND_Y - 5)],
    )
    engine.check_collisions(state)
    assert state.game_over is True


def test_dead_enemy_contact_is_harmless(engine):
    enemy = live_enemy(PLAYER_X + 5, y=GROUND_Y - 5)
    enemy.dead = True
    state = WorldState(players={"a": Player(id="a", y=GROUND_Y)}, enemies=[enemy])
    engine.check_collisions(state)
    assert state.game_over is False


def test_finished_round_freezes_hostiles_but_not_players(engine):
    enemy = live_enemy(400, shoot_timer=0.001)
    bullet = Bullet(x=300, y=300, vx=-300, vy=0, origin=BulletOrigin.ENEMY)
    player = Player(id="a", y=GROUND_Y - 100)
    state = WorldState(players={"a": player}, enemies=[enemy], bullets=[bullet], game_over=True)

    engine.step(state, TICK_DT)

    assert enemy.x == 400
    assert state.bullets == [bullet]
    assert bullet.x == 300
    assert player.y > GROUND_Y - 100
