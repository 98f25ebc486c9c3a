# shooter/models/entities.py
"""Game entity models and data classes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class BulletOrigin(str, Enum):
    """Who fired a bullet; decides what it can hit."""

    PLAYER = "player"
    ENEMY = "enemy"


class CollisionPolicy(str, Enum):
    """What a lethal hit on a player does to the round."""

    GAME_OVER = "game_over"
    LOG_ONLY = "log_only"


@dataclass
class SunColor:
    R: int = 255
    G: int = 255
    B: int = 0
    A: int = 255


@dataclass
class Sun:
    """Derived from elapsed world time on every tick."""

    x: float = 0.0
    y: float = 0.0
    color: SunColor = field(default_factory=SunColor)


@dataclass
class Player:
    """Represents a player in the game. Horizontal position is fixed."""

    id: str
    y: float
    vy: float = 0.0
    respawning: bool = False


@dataclass
class Enemy:
    """Represents a walking enemy that shoots to the left."""

    x: float
    y: float
    vx: float
    vy: float
    shootTimer: float
    dead: bool = False
    deathTimer: float = 0.0
    walkPhase: float = 0.0


@dataclass
class Bullet:
    """Represents a bullet fired by a player or an enemy."""

    x: float
    y: float
    vx: float
    vy: float
    origin: BulletOrigin


@dataclass
class WorldState:
    """The whole shared world. Mutated only while holding the state lock."""

    sun: Sun = field(default_factory=Sun)
    players: Dict[str, Player] = field(default_factory=dict)
    enemies: List[Enemy] = field(default_factory=list)
    bullets: List[Bullet] = field(default_factory=list)
    points: int = 0
    level: int = 1
    time: float = 0.0
    game_over: bool = False
