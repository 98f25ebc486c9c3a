# shooter/config/settings.py
"""Game configuration constants and settings."""

import os

# Screen settings
SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600
GROUND_Y = 500

# Player settings
PLAYER_X = 100
PLAYER_WIDTH = 20
PLAYER_HEIGHT = 40
GRAVITY = 800.0
JUMP_IMPULSE = -350.0
PLAYER_BULLET_SPEED = 500.0

# Enemy settings
ENEMY_SPAWN_MARGIN = 50
ENEMY_GROUND_OFFSET = 10
ENEMY_BASE_SPEED = 100.0
ENEMY_SPEED_PER_LEVEL = 10.0
ENEMY_BULLET_SPEED = -300.0
ENEMY_FIRST_SHOT_DELAY = 2.0
ENEMY_SHOT_DELAY = 1.5
ENEMY_SHOT_JITTER = 1.0
ENEMY_WALK_RATE = 4.0
ENEMY_CULL_LEFT = -50
ENEMY_CULL_DEPTH = 100

# Collision settings
KILL_RADIUS = 15
CONTACT_RADIUS = 20
BULLET_BOX_SIZE = 5
CONSUMED_BULLET_X = -1000

# Scoring settings
KILL_BONUS = 100
LEVEL_UP_POINTS = 1000

# Sun settings
SUN_PERIOD = 30.0
SUN_GREEN_START = 255.0
SUN_GREEN_END = 100.0

# Server settings
TICK_INTERVAL = 0.016  # seconds
TICK_DT = 1.0 / 60.0

HOST = os.getenv("SHOOTER_HOST", "0.0.0.0")
PORT = int(os.getenv("SHOOTER_PORT", "3000"))
LOG_LEVEL = os.getenv("SHOOTER_LOG_LEVEL", "INFO").upper()
COLLISION_POLICY = os.getenv("SHOOTER_COLLISION_POLICY", "game_over")
SEND_TIMEOUT = float(os.getenv("SHOOTER_SEND_TIMEOUT", "0.012"))
WS_PING_INTERVAL = float(os.getenv("SHOOTER_WS_PING_INTERVAL", "5.0"))
WS_PING_TIMEOUT = float(os.getenv("SHOOTER_WS_PING_TIMEOUT", "5.0"))

# Client settings
SHOOT_COOLDOWN = 0.5
LIVENESS_THRESHOLD = 2.0


def get_game_config():
    """Get the complete game configuration as a dictionary."""
    return {
        "screenWidth": SCREEN_WIDTH,
        "screenHeight": SCREEN_HEIGHT,
        "groundY": GROUND_Y,
        "playerX": PLAYER_X,
        "playerWidth": PLAYER_WIDTH,
        "playerHeight": PLAYER_HEIGHT,
        "gravity": GRAVITY,
        "jumpImpulse": JUMP_IMPULSE,
        "playerBulletSpeed": PLAYER_BULLET_SPEED,
        "enemyBulletSpeed": ENEMY_BULLET_SPEED,
        "killBonus": KILL_BONUS,
        "levelUpPoints": LEVEL_UP_POINTS,
        "sunPeriod": SUN_PERIOD,
        "tickInterval": TICK_INTERVAL,
        "shootCooldown": SHOOT_COOLDOWN,
    }
