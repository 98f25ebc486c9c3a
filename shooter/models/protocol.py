# shooter/models/protocol.py
"""Wire format for client commands and server snapshots."""

import json
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional, Union

from .entities import (
    Bullet,
    BulletOrigin,
    Enemy,
    Player,
    Sun,
    SunColor,
    WorldState,
)


class ProtocolError(ValueError):
    """Raised when a payload does not match the wire format."""


class Command(str, Enum):
    JUMP = "jump"
    SHOOT = "shoot"
    RESET = "reset"


@dataclass
class ClientMessage:
    """A decoded client command. playerId may be omitted by the client."""

    command: Command
    playerId: Optional[str] = None


def parse_client_message(raw: Union[str, bytes]) -> ClientMessage:
    """Decode one inbound text frame into a command message."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ProtocolError("message must be a JSON object")

    message_type = data.get("type")
    if message_type != "command":
        raise ProtocolError(f"unknown message type: {message_type!r}")

    try:
        command = Command(data.get("command"))
    except ValueError as e:
        raise ProtocolError(f"unknown command: {data.get('command')!r}") from e

    player_id = data.get("playerId")
    if player_id is not None and not isinstance(player_id, str):
        raise ProtocolError("playerId must be a string")

    return ClientMessage(command=command, playerId=player_id or None)


def encode_command(player_id: str, command: Command) -> str:
    """Encode a command message as sent by clients."""
    return json.dumps(
        {"type": "command", "playerId": player_id, "command": Command(command).value}
    )


def _bullet_to_dict(bullet: Bullet) -> dict:
    return {
        "x": bullet.x,
        "y": bullet.y,
        "vx": bullet.vx,
        "vy": bullet.vy,
        "from": bullet.origin.value,
    }


def snapshot_to_dict(state: WorldState) -> dict:
    """Build the full-state broadcast payload. Elapsed time is not sent."""
    return {
        "sun": asdict(state.sun),
        "players": {pid: asdict(p) for pid, p in state.players.items()},
        "enemies": [asdict(e) for e in state.enemies],
        "bullets": [_bullet_to_dict(b) for b in state.bullets],
        "points": state.points,
        "level": state.level,
        "gameOver": state.game_over,
    }


def encode_snapshot(state: WorldState) -> str:
    return json.dumps(snapshot_to_dict(state), separators=(",", ":"))


def snapshot_from_dict(data: dict) -> WorldState:
    """Rebuild a WorldState from a received snapshot payload."""
    try:
        sun_data = data["sun"]
        sun = Sun(
            x=float(sun_data["x"]),
            y=float(sun_data["y"]),
            color=SunColor(**sun_data["color"]),
        )
        players = {
            pid: Player(
                id=p["id"],
                y=float(p["y"]),
                vy=float(p["vy"]),
                respawning=bool(p.get("respawning", False)),
            )
            for pid, p in data["players"].items()
        }
        enemies = [Enemy(**e) for e in data["enemies"]]
        bullets = [
            Bullet(
                x=b["x"],
                y=b["y"],
                vx=b["vx"],
                vy=b["vy"],
                origin=BulletOrigin(b["from"]),
            )
            for b in data["bullets"]
        ]
        return WorldState(
            sun=sun,
            players=players,
            enemies=enemies,
            bullets=bullets,
            points=int(data["points"]),
            level=int(data["level"]),
            game_over=bool(data["gameOver"]),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ProtocolError(f"malformed snapshot: {e}") from e


def decode_snapshot(raw: str) -> WorldState:
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ProtocolError("snapshot must be a JSON object")
    return snapshot_from_dict(data)
