"""Collision helpers for the game server."""

from __future__ import annotations

import enum
from typing import AbstractSet, Optional

from .snake import Snake
from .utils import Cell


class Collision(enum.Enum):
    """Reason a head movement ended the run."""

    WALL = "wall"
    OBSTACLE = "obstacle"
    SELF = "self"


def detect_collision(
    new_head: Cell,
    snake: Snake,
    obstacles: AbstractSet[Cell],
    width: int,
    height: int,
) -> Optional[Collision]:
    """Return what ``new_head`` runs into, or ``None`` if the move is legal.

    Walls are lethal; there is no wrap-around. The whole current body counts,
    including the tail cell that would move away on this tick.
    """

    if not new_head.inside(width, height):
        return Collision.WALL
    if new_head in obstacles:
        return Collision.OBSTACLE
    if snake.occupies(new_head):
        return Collision.SELF
    return None
