"""JSON protocol helpers for the websocket transport.

Inbound and outbound messages are closed sets of dataclasses. Raw frames are
turned into one of the inbound variants by :func:`parse_client_message`;
outbound variants know how to encode themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import List, Optional, Union

from .registry import Role
from .utils import Cell, is_cardinal


# -- inbound ---------------------------------------------------------------


@dataclass(frozen=True)
class Join:
    name: Optional[str] = None


@dataclass(frozen=True)
class ChangeDirection:
    direction: Cell


@dataclass(frozen=True)
class PlaceBlock:
    cell: Cell


@dataclass(frozen=True)
class Reset:
    pass


ClientMessage = Union[Join, ChangeDirection, PlaceBlock, Reset]


def _require_int(payload: dict, key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Field {key!r} must be an integer")
    return value


def parse_client_message(message: str | bytes) -> ClientMessage:
    """Parse a raw client ``message`` into one of the inbound variants.

    Raises ``ValueError`` for anything that is not a well formed message.
    """

    try:
        payload = json.loads(message)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        raise ValueError("Invalid client message") from exc
    if not isinstance(payload, dict):
        raise ValueError("Client message must be a JSON object")

    kind = payload.get("type")
    if kind == "join":
        name = payload.get("name")
        return Join(name if isinstance(name, str) else None)
    if kind == "changeDirection":
        direction = payload.get("direction")
        if not isinstance(direction, dict):
            raise ValueError("changeDirection needs a direction object")
        cell = Cell(_require_int(direction, "x"), _require_int(direction, "y"))
        if not is_cardinal(cell):
            raise ValueError("Direction must be a cardinal unit vector")
        return ChangeDirection(cell)
    if kind == "placeBlock":
        return PlaceBlock(Cell(_require_int(payload, "x"), _require_int(payload, "y")))
    if kind == "reset":
        return Reset()
    raise ValueError(f"Unknown message type {kind!r}")


# -- outbound --------------------------------------------------------------


@dataclass(frozen=True)
class RoleAssignment:
    role: Role

    def to_dict(self) -> dict:
        return {"type": "roleAssignment", "role": self.role.value}


@dataclass(frozen=True)
class GameState:
    """Full snapshot of the board, roster and leaderboard."""

    snake: List[dict]
    obstacles: List[dict]
    food: Optional[dict]
    roster: List[dict] = field(default_factory=list)
    leaderboard: List[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "type": "updateGameState",
            "state": {
                "snake": self.snake,
                "obstacles": self.obstacles,
                "food": self.food,
                "roster": self.roster,
                "leaderboard": self.leaderboard,
            },
        }


@dataclass(frozen=True)
class GameOver:
    def to_dict(self) -> dict:
        return {"type": "gameOver"}


ServerMessage = Union[RoleAssignment, GameState, GameOver]


def encode(message: ServerMessage) -> str:
    """Encode an outbound message for the wire."""

    return json.dumps(message.to_dict())
